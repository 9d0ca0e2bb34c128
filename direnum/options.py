# direnum/direnum/options.py
from typing import Any, Dict, Optional

from direnum.constants import (
    DEFAULT_ATTRIBUTES_TO_SKIP,
    DEFAULT_MAX_RECURSION_DEPTH,
    SPECIAL_DIRECTORY_NAMES,
    FileAttributes,
    MatchCasing,
    MatchType,
    attribute_names,
    parse_file_attributes,
    parse_match_casing,
    parse_match_type,
)
from direnum.errors import FrozenOptionsError, InvalidArgumentError, OutOfRangeError

OptionsDict = Dict[str, Any]

FIELD_NAMES = (
    "recurse_subdirectories",
    "ignore_inaccessible",
    "buffer_size",
    "attributes_to_skip",
    "match_type",
    "match_casing",
    "max_recursion_depth",
    "return_special_directories",
)


class EnumerationOptions:
    """
    File and directory enumeration options.

    A default-constructed instance carries the recommended modern policy: inaccessible
    entries are skipped, hidden and system entries are filtered out, patterns use
    Simple matching and recursion depth is unbounded. The enumerator that consumes
    these options reads every field; this class only holds and validates them.

    Only `max_recursion_depth` is validated. Field combinations are not, so for example
    `return_special_directories` together with `recurse_subdirectories` is accepted and
    left to the enumerator to interpret.
    """

    def __init__(
        self,
        recurse_subdirectories: bool = False,
        ignore_inaccessible: bool = True,
        buffer_size: int = 0,
        attributes_to_skip: FileAttributes = DEFAULT_ATTRIBUTES_TO_SKIP,
        match_type: MatchType = MatchType.SIMPLE,
        match_casing: MatchCasing = MatchCasing.PLATFORM_DEFAULT,
        max_recursion_depth: int = DEFAULT_MAX_RECURSION_DEPTH,
        return_special_directories: bool = False,
    ):
        object.__setattr__(self, "_frozen", False)
        self._max_recursion_depth = DEFAULT_MAX_RECURSION_DEPTH
        self.recurse_subdirectories = recurse_subdirectories
        self.ignore_inaccessible = ignore_inaccessible
        # Suggested buffer size in bytes, 0 for no suggestion. Passed through to the enumerator.
        self.buffer_size = buffer_size
        self.attributes_to_skip = attributes_to_skip
        self.match_type = match_type
        self.match_casing = match_casing
        self.max_recursion_depth = max_recursion_depth
        self.return_special_directories = return_special_directories

    def __setattr__(self, name: str, value: Any) -> None:
        if self._frozen:
            raise FrozenOptionsError(
                f"Cannot set '{name}' on frozen enumeration options; call copy() to get a mutable instance"
            )
        if name not in FIELD_NAMES and name != "_max_recursion_depth":
            raise AttributeError(f"'EnumerationOptions' has no option '{name}'")
        super().__setattr__(name, value)

    @property
    def max_recursion_depth(self) -> int:
        """Maximum directory depth to descend when recursing. 0 returns the initial directory's contents only."""
        return self._max_recursion_depth

    @max_recursion_depth.setter
    def max_recursion_depth(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"max_recursion_depth must be an int (got {type(value).__name__})")
        if value < 0:
            raise OutOfRangeError(f"max_recursion_depth must be non-negative (got {value})")
        self._max_recursion_depth = value

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def copy(self) -> "EnumerationOptions":
        """Returns an independent, mutable copy. Copying a frozen preset yields a mutable one."""
        return EnumerationOptions(**{name: getattr(self, name) for name in FIELD_NAMES})

    def freeze(self) -> "EnumerationOptions":
        """Returns a frozen copy that rejects every field assignment."""
        frozen = self.copy()
        object.__setattr__(frozen, "_frozen", True)
        return frozen

    # --- Predicates for enumerators ---

    def skips_attributes(self, attributes: FileAttributes | int) -> bool:
        """True when an entry with these attributes should be excluded."""
        return bool(int(attributes) & int(self.attributes_to_skip))

    def includes_special_directory(self, name: str) -> bool:
        """False for '.' and '..' unless special directories were requested; True for any other name."""
        if name in SPECIAL_DIRECTORY_NAMES:
            return self.return_special_directories
        return True

    def can_descend(self, depth: int) -> bool:
        """True when a subdirectory found at `depth` (0 = a direct child of the root) may be entered."""
        return self.recurse_subdirectories and depth < self.max_recursion_depth

    # --- Serialization ---

    def to_dict(self) -> OptionsDict:
        return {
            "recurse_subdirectories": self.recurse_subdirectories,
            "ignore_inaccessible": self.ignore_inaccessible,
            "buffer_size": self.buffer_size,
            "attributes_to_skip": attribute_names(self.attributes_to_skip),
            "match_type": self.match_type.name,
            "match_casing": self.match_casing.name,
            "max_recursion_depth": self.max_recursion_depth,
            "return_special_directories": self.return_special_directories,
        }

    @classmethod
    def from_dict(cls, data: OptionsDict, base: Optional["EnumerationOptions"] = None) -> "EnumerationOptions":
        """
        Builds options from plain data such as a parsed config file or a to_dict() result.
        Fields absent from `data` keep the value from `base` (recommended defaults if omitted).
        """
        unknown_keys = sorted(set(data) - set(FIELD_NAMES))
        if unknown_keys:
            raise InvalidArgumentError(f"Unknown enumeration option(s): {', '.join(unknown_keys)}")

        options = base.copy() if base is not None else cls()
        for name, value in data.items():
            if name == "attributes_to_skip":
                value = parse_file_attributes(value)
            elif name == "match_type":
                value = parse_match_type(value)
            elif name == "match_casing":
                value = parse_match_casing(value)
            setattr(options, name, value)
        return options

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EnumerationOptions):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in FIELD_NAMES)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in FIELD_NAMES)
        prefix = "frozen " if self._frozen else ""
        return f"<{prefix}EnumerationOptions {fields}>"
