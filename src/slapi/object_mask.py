"""Object Mask support for SoftLayer API requests.

An object mask selects which nested properties of a remote object are
returned. The mask is kept as a tree of dictionaries where an empty
dictionary marks a leaf property, and is serialized to the compact
``mask[a,b.c]`` form expected by the ``objectMask`` query parameter.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence, Union

MaskTree = Dict[str, Dict[str, Any]]

EMPTY_MASK = "mask[]"


class ObjectMaskError(Exception):
    """Base exception for object mask errors."""

    pass


class MaskSyntaxError(ObjectMaskError, ValueError):
    """Exception raised when a mask key is not a legal property name."""

    pass


class MaskPathNotFoundError(ObjectMaskError, LookupError):
    """Exception raised when a mask path does not exist in the current mask."""

    def __init__(self, segment: str, path: str, mask_string: str):
        super().__init__(
            f'"{segment}" of path "{path}" doesn\'t exist in the current mask. '
            f"({mask_string})"
        )
        self.segment = segment
        self.path = path
        self.mask_string = mask_string


class InvalidMaskPropertyError(ObjectMaskError, ValueError):
    """Exception raised when push() receives an unusable property argument."""

    pass


class ObjectMask:
    """Mutable tree of the properties to request from the API.

    Every mutator validates its input before touching the tree and returns
    the mask itself so calls can be chained::

        mask = ObjectMask().push("id").push(["name", "domain"], "")
        mask.push("keyInRoot").push("subKey", "keyInRoot")
    """

    def __init__(self, value: Optional[Mapping] = None):
        self._mask_obj: MaskTree = {}
        if value is not None:
            self.set(value)

    @property
    def mask(self) -> str:
        """Serialized ``mask[...]`` string."""
        return self.to_string()

    @property
    def mask_string(self) -> str:
        return self.to_string()

    def set(self, value: Optional[Mapping] = None, path: str = "") -> "ObjectMask":
        """Assign a subtree at a dot-delimited path.

        An empty path replaces the whole mask. Otherwise the parent of the
        final segment must already exist and the final segment is
        overwritten with ``value``.

        Args:
            value: Nested mapping of property names, ``{}`` for a leaf
            path: Dot-delimited location of the subtree

        Returns:
            The mask instance for chaining

        Raises:
            MaskSyntaxError: If any key in ``value`` or segment of ``path`` is illegal
            MaskPathNotFoundError: If the parent path doesn't exist
        """
        value = {} if value is None else value
        self._check_keys(value)
        subtree = self._copy_tree(value)

        if path == "":
            self._mask_obj = subtree
        else:
            parent, target = self._split_path(path)
            ref = self._get_ref(parent)
            ref[target] = subtree

        return self

    def unset(self, path: str = "") -> "ObjectMask":
        """Remove a path from the mask, or clear the mask when path is empty.

        Removing a property that isn't present is a no-op.

        Raises:
            MaskSyntaxError: If ``path`` has an empty segment
            MaskPathNotFoundError: If the parent path doesn't exist
        """
        if path == "":
            self._mask_obj = {}
        else:
            parent, target = self._split_path(path)
            ref = self._get_ref(parent)
            ref.pop(target, None)

        return self

    def push(self, prop: Union[str, Sequence[str]], path: str = "") -> "ObjectMask":
        """Add one or more leaf properties at a path.

        The properties replace whatever was stored at ``path``; they are not
        merged into it.

        Args:
            prop: Property name or list of property names
            path: Dot-delimited location for the new properties

        Returns:
            The mask instance for chaining

        Raises:
            InvalidMaskPropertyError: If prop is empty or not string(s)
        """
        names = self._property_names(prop)
        self.set({name: {} for name in names}, path)
        return self

    def to_dict(self) -> MaskTree:
        """Return a deep copy of the mask tree."""
        return self._copy_tree(self._mask_obj)

    def to_string(self) -> str:
        return f"mask[{','.join(self._leaf_paths(self._mask_obj))}]"

    def _property_names(self, prop: Union[str, Sequence[str]]) -> List[str]:
        if isinstance(prop, str):
            if not prop:
                raise InvalidMaskPropertyError("Invalid property/properties name/s")
            return [prop]

        if not isinstance(prop, (list, tuple)) or not prop:
            raise InvalidMaskPropertyError("Invalid property/properties name/s")

        for name in prop:
            if not isinstance(name, str) or not name:
                raise InvalidMaskPropertyError(
                    f"Invalid property name in {list(prop)!r}: {name!r}"
                )
        return list(prop)

    def _check_keys(self, obj: Mapping) -> None:
        """Validate that no key in a nested mapping contains a period.

        Raises:
            MaskSyntaxError: On the first illegal key or non-mapping value
        """
        if not isinstance(obj, Mapping):
            raise MaskSyntaxError(
                f"Mask values must be mappings, got {type(obj).__name__}"
            )

        for key, value in obj.items():
            if not isinstance(key, str):
                raise MaskSyntaxError(f"Object keys must be strings, got {key!r}")
            if not key:
                raise MaskSyntaxError("Object keys cannot be empty")
            if "." in key:
                raise MaskSyntaxError("Object keys cannot include periods")
            if not isinstance(value, Mapping):
                raise MaskSyntaxError(
                    f'Value of "{key}" must be a mapping, got {type(value).__name__}'
                )
            if value:
                self._check_keys(value)

    def _get_ref(self, path: str = "") -> MaskTree:
        """Get a reference to the subtree stored at a path.

        Raises:
            MaskPathNotFoundError: If a segment is missing or is a leaf
        """
        ref = self._mask_obj

        if path != "":
            for key in path.split("."):
                ref = ref.get(key)
                if not ref:
                    raise MaskPathNotFoundError(key, path, self.to_string())

        return ref

    @staticmethod
    def _split_path(path: str):
        segments = path.split(".")
        if not all(segments):
            raise MaskSyntaxError(f'Path "{path}" contains an empty segment')
        return ".".join(segments[:-1]), segments[-1]

    @classmethod
    def _copy_tree(cls, obj: Mapping) -> MaskTree:
        return {key: cls._copy_tree(value) for key, value in obj.items()}

    @classmethod
    def _leaf_paths(cls, obj: Mapping, current: str = "") -> List[str]:
        paths: List[str] = []
        for key, value in obj.items():
            new_key = f"{current}.{key}" if current else key
            if value:
                paths.extend(cls._leaf_paths(value, new_key))
            else:
                paths.append(new_key)
        return paths

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"ObjectMask({self.to_string()!r})"

    def __len__(self) -> int:
        return len(self._mask_obj)

    def __bool__(self) -> bool:
        return bool(self._mask_obj)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObjectMask):
            return NotImplemented
        return self._mask_obj == other._mask_obj

    __hash__ = None  # type: ignore[assignment]
