# direnum/direnum/presets.py
"""
Named, immutable option presets and conversions to and from the legacy
two-valued recursion flag (SearchOption).

The conversions are lossy and are not inverses of each other in general:

* `from_search_option` only ever produces one of the fixed compatible presets
  (Win32 matching, no attribute filtering), whatever options the caller had in mind.
* `to_search_option` inspects `recurse_subdirectories` alone and discards every other field.

A round trip flag -> options -> flag is stable; options -> flag -> options is not.

There are two compatible families that differ only in `ignore_inaccessible`. The
"safe" family (inaccessible entries skipped) is what `from_search_option` returns by
default. The non-safe family surfaces access errors, matching what legacy
directory/file listing calls did when no options were given. Neither family is
documented as the right one for every call site, so both are exposed and the choice
is left to the caller through the `safe` argument.
"""
from typing import Dict, Optional, Union

from direnum.constants import FileAttributes, MatchType, SearchOption, parse_search_option
from direnum.errors import InvalidArgumentError
from direnum.options import EnumerationOptions
from direnum.utils.logger import logger


def _compatible(recurse_subdirectories: bool, ignore_inaccessible: bool) -> EnumerationOptions:
    return EnumerationOptions(
        recurse_subdirectories=recurse_subdirectories,
        ignore_inaccessible=ignore_inaccessible,
        match_type=MatchType.WIN32,
        attributes_to_skip=FileAttributes.NONE,
    ).freeze()


# Built once at import time and never mutated afterwards, so concurrent readers need no locking.
COMPATIBLE_TOP = _compatible(recurse_subdirectories=False, ignore_inaccessible=False)
COMPATIBLE_RECURSIVE = _compatible(recurse_subdirectories=True, ignore_inaccessible=False)
COMPATIBLE_SAFE_TOP = _compatible(recurse_subdirectories=False, ignore_inaccessible=True)
COMPATIBLE_SAFE_RECURSIVE = _compatible(recurse_subdirectories=True, ignore_inaccessible=True)
DEFAULT = EnumerationOptions().freeze()

PRESETS: Dict[str, EnumerationOptions] = {
    "default": DEFAULT,
    "compatible-top": COMPATIBLE_TOP,
    "compatible-recursive": COMPATIBLE_RECURSIVE,
    "compatible-safe-top": COMPATIBLE_SAFE_TOP,
    "compatible-safe-recursive": COMPATIBLE_SAFE_RECURSIVE,
}


def get_preset(name: str) -> EnumerationOptions:
    """Looks up a frozen preset by name. Case-insensitive; '_' and '-' are interchangeable."""
    key = name.strip().lower().replace("_", "-")
    try:
        return PRESETS[key]
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown preset {name!r}. Available presets: {', '.join(PRESETS)}"
        ) from None


def from_search_option(search_option: Union[SearchOption, int], safe: bool = True) -> EnumerationOptions:
    """
    Converts a legacy recursion flag to a frozen compatible preset.

    ALL_DIRECTORIES maps to the recursive preset and TOP_DIRECTORY_ONLY to the top-only one.
    With `safe=True` (the default) the presets skip inaccessible entries; with `safe=False`
    they surface access errors. Any other value raises InvalidArgumentError.
    """
    # Strings are accepted by parse_search_option for config files, but not here.
    if isinstance(search_option, bool) or not isinstance(search_option, int):
        raise InvalidArgumentError(f"Argument out of range for search_option: {search_option!r}")
    flag = parse_search_option(search_option)

    if flag == SearchOption.ALL_DIRECTORIES:
        preset = COMPATIBLE_SAFE_RECURSIVE if safe else COMPATIBLE_RECURSIVE
    else:
        preset = COMPATIBLE_SAFE_TOP if safe else COMPATIBLE_TOP
    logger.debug(f"Presets: {flag.name} (safe={safe}) -> {preset!r}")
    return preset


def to_search_option(options: EnumerationOptions) -> SearchOption:
    """Reduces options to the legacy flag. Only `recurse_subdirectories` is consulted."""
    return SearchOption.ALL_DIRECTORIES if options.recurse_subdirectories else SearchOption.TOP_DIRECTORY_ONLY


def get_or_default(options: Optional[EnumerationOptions]) -> EnumerationOptions:
    """Returns `options` unchanged, or a new mutable default instance when it is None."""
    if options is not None:
        return options
    return EnumerationOptions()
