# direnum/direnum/constants.py
import sys
from enum import Enum, IntEnum, IntFlag
from typing import Iterable, Union

from direnum.errors import InvalidArgumentError

TOOL_NAME = "direnum"
TOOL_VERSION = "0.1.0"  # Corresponds to pyproject.toml version

DEFAULT_CONFIG_FILENAME = ".direnum"

# Python ints are unbounded; sys.maxsize is the largest depth any walker can index.
DEFAULT_MAX_RECURSION_DEPTH = sys.maxsize

SPECIAL_DIRECTORY_NAMES = (".", "..")


class MatchType(Enum):
    SIMPLE = "simple"  # '*' and '?' only. '*.*' needs a literal period.
    WIN32 = "win32"    # DOS semantics. '*.*' matches everything.


class MatchCasing(Enum):
    PLATFORM_DEFAULT = "platform_default"
    CASE_SENSITIVE = "case_sensitive"
    CASE_INSENSITIVE = "case_insensitive"


class SearchOption(IntEnum):
    # Values are wire-compatible with the legacy two-valued recursion flag.
    TOP_DIRECTORY_ONLY = 0
    ALL_DIRECTORIES = 1


class FileAttributes(IntFlag):
    NONE = 0
    READONLY = 0x1
    HIDDEN = 0x2
    SYSTEM = 0x4
    DIRECTORY = 0x10
    ARCHIVE = 0x20
    DEVICE = 0x40
    NORMAL = 0x80
    TEMPORARY = 0x100
    SPARSE_FILE = 0x200
    REPARSE_POINT = 0x400
    COMPRESSED = 0x800
    OFFLINE = 0x1000
    NOT_CONTENT_INDEXED = 0x2000
    ENCRYPTED = 0x4000
    INTEGRITY_STREAM = 0x8000
    NO_SCRUB_DATA = 0x20000


DEFAULT_ATTRIBUTES_TO_SKIP = FileAttributes.HIDDEN | FileAttributes.SYSTEM


def _normalize_name(name: str) -> str:
    """'TopDirectoryOnly', 'top-directory-only' and 'TOP_DIRECTORY_ONLY' all become 'topdirectoryonly'."""
    return name.strip().replace("_", "").replace("-", "").lower()


def attribute_names(attributes: FileAttributes) -> list[str]:
    """Returns the single-bit flag names set in `attributes`, sorted by bit value."""
    return [flag.name for flag in FileAttributes if flag.value and flag.value & int(attributes)]


def parse_file_attributes(names: Union[str, Iterable[str], int, FileAttributes, None]) -> FileAttributes:
    """
    Builds an attribute bitset from flag names.

    Accepts a FileAttributes value, a raw integer bitset, a comma-separated string,
    or an iterable of names. Names are case-insensitive; "none" contributes nothing.
    """
    if names is None:
        return FileAttributes.NONE
    if isinstance(names, bool):
        raise InvalidArgumentError(f"attributes_to_skip must be attribute names or a bitset (got {names!r})")
    if isinstance(names, int):
        known_bits = 0
        for flag in FileAttributes:
            known_bits |= flag.value
        if names < 0 or names & ~known_bits:
            raise InvalidArgumentError(f"attributes_to_skip contains unknown attribute bits (got {names:#x})")
        return FileAttributes(names)
    if isinstance(names, str):
        names = [part for part in names.split(",") if part.strip()]

    lookup = {_normalize_name(flag.name): flag for flag in FileAttributes}
    lookup["none"] = FileAttributes.NONE
    result = FileAttributes.NONE
    for name in names:
        flag = lookup.get(_normalize_name(str(name)))
        if flag is None:
            raise InvalidArgumentError(f"Unknown file attribute {name!r}")
        result |= flag
    return result


def parse_search_option(value: Union[SearchOption, int, str]) -> SearchOption:
    """Resolves a legacy recursion flag from a member, its integer value, or its name."""
    if isinstance(value, SearchOption):
        return value
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Argument out of range for search_option: {value!r}")
    if isinstance(value, int):
        try:
            return SearchOption(value)
        except ValueError:
            raise InvalidArgumentError(f"Argument out of range for search_option: {value!r}") from None
    if isinstance(value, str):
        wanted = _normalize_name(value)
        for member in SearchOption:
            if _normalize_name(member.name) == wanted:
                return member
    raise InvalidArgumentError(f"Argument out of range for search_option: {value!r}")


def parse_match_type(value: Union[MatchType, str]) -> MatchType:
    if isinstance(value, MatchType):
        return value
    wanted = _normalize_name(str(value))
    for member in MatchType:
        if _normalize_name(member.name) == wanted:
            return member
    raise InvalidArgumentError(f"Unknown match_type {value!r}")


def parse_match_casing(value: Union[MatchCasing, str]) -> MatchCasing:
    if isinstance(value, MatchCasing):
        return value
    wanted = _normalize_name(str(value))
    for member in MatchCasing:
        if _normalize_name(member.name) == wanted:
            return member
    raise InvalidArgumentError(f"Unknown match_casing {value!r}")


from typing import TypedDict


class MatchResult(TypedDict):
    name: str
    pattern: str
    match_type: str    # Name of the MatchType member, e.g. "WIN32"
    match_casing: str  # Name of the MatchCasing member
    matched: bool
