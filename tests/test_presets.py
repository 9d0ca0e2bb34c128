# tests/test_presets.py
import threading

import pytest

from direnum import presets
from direnum.constants import FileAttributes, MatchType, SearchOption
from direnum.errors import FrozenOptionsError, InvalidArgumentError
from direnum.options import EnumerationOptions
from direnum.presets import (
    COMPATIBLE_RECURSIVE,
    COMPATIBLE_SAFE_RECURSIVE,
    COMPATIBLE_SAFE_TOP,
    COMPATIBLE_TOP,
    from_search_option,
    get_or_default,
    get_preset,
    to_search_option,
)

# (preset, recurse_subdirectories, ignore_inaccessible)
PRESET_TABLE = [
    (COMPATIBLE_TOP, False, False),
    (COMPATIBLE_RECURSIVE, True, False),
    (COMPATIBLE_SAFE_TOP, False, True),
    (COMPATIBLE_SAFE_RECURSIVE, True, True),
]


@pytest.mark.parametrize("preset, recurse, ignore_inaccessible", PRESET_TABLE)
def test_compatible_preset_fields(preset, recurse, ignore_inaccessible):
    assert preset.recurse_subdirectories is recurse
    assert preset.ignore_inaccessible is ignore_inaccessible
    assert preset.match_type == MatchType.WIN32
    assert preset.attributes_to_skip == FileAttributes.NONE
    # Everything else keeps the recommended defaults.
    defaults = EnumerationOptions()
    assert preset.buffer_size == defaults.buffer_size
    assert preset.match_casing == defaults.match_casing
    assert preset.max_recursion_depth == defaults.max_recursion_depth
    assert preset.return_special_directories is False


@pytest.mark.parametrize("preset, recurse, ignore_inaccessible", PRESET_TABLE)
def test_presets_are_frozen(preset, recurse, ignore_inaccessible):
    assert preset.is_frozen
    with pytest.raises(FrozenOptionsError):
        preset.recurse_subdirectories = not recurse
    assert preset.recurse_subdirectories is recurse


def test_default_preset_matches_fresh_construction():
    assert presets.DEFAULT == EnumerationOptions()
    assert presets.DEFAULT.is_frozen


@pytest.mark.parametrize("flag", list(SearchOption))
def test_search_option_round_trip(flag):
    assert to_search_option(from_search_option(flag)) == flag
    assert to_search_option(from_search_option(flag, safe=False)) == flag


def test_from_all_directories_is_safe_recursive():
    options = from_search_option(SearchOption.ALL_DIRECTORIES)
    assert options is COMPATIBLE_SAFE_RECURSIVE
    assert options.recurse_subdirectories is True
    assert options.ignore_inaccessible is True


def test_from_top_directory_only_is_safe_top():
    options = from_search_option(SearchOption.TOP_DIRECTORY_ONLY)
    assert options is COMPATIBLE_SAFE_TOP
    assert options.ignore_inaccessible is True
    assert options.recurse_subdirectories is False


def test_non_safe_family_surfaces_access_errors():
    assert from_search_option(SearchOption.ALL_DIRECTORIES, safe=False) is COMPATIBLE_RECURSIVE
    assert from_search_option(SearchOption.TOP_DIRECTORY_ONLY, safe=False) is COMPATIBLE_TOP


def test_from_search_option_accepts_wire_values():
    assert from_search_option(0) is COMPATIBLE_SAFE_TOP
    assert from_search_option(1) is COMPATIBLE_SAFE_RECURSIVE


@pytest.mark.parametrize("bad_flag", [2, -1, 99, "AllDirectories", None, True, 1.0])
def test_from_search_option_rejects_out_of_range(bad_flag):
    with pytest.raises(InvalidArgumentError):
        from_search_option(bad_flag)


def test_to_search_option_only_reads_recursion():
    options = EnumerationOptions(
        recurse_subdirectories=True,
        match_type=MatchType.SIMPLE,
        attributes_to_skip=FileAttributes.HIDDEN,
        max_recursion_depth=0,
    )
    assert to_search_option(options) == SearchOption.ALL_DIRECTORIES
    assert to_search_option(EnumerationOptions()) == SearchOption.TOP_DIRECTORY_ONLY


def test_options_to_flag_to_options_is_lossy():
    options = EnumerationOptions(recurse_subdirectories=True, max_recursion_depth=2)
    converted = from_search_option(to_search_option(options))
    assert converted != options
    assert converted.match_type == MatchType.WIN32
    assert converted.max_recursion_depth != 2


def test_search_option_wire_values():
    assert int(SearchOption.TOP_DIRECTORY_ONLY) == 0
    assert int(SearchOption.ALL_DIRECTORIES) == 1


def test_get_or_default_returns_given_instance():
    options = EnumerationOptions(buffer_size=1)
    assert get_or_default(options) is options
    assert get_or_default(COMPATIBLE_TOP) is COMPATIBLE_TOP


def test_get_or_default_returns_fresh_defaults():
    first = get_or_default(None)
    assert first == EnumerationOptions()
    assert not first.is_frozen

    first.recurse_subdirectories = True
    first.max_recursion_depth = 1
    first.attributes_to_skip = FileAttributes.NONE

    second = get_or_default(None)
    assert second is not first
    assert second == EnumerationOptions()


@pytest.mark.parametrize(
    "name, expected",
    [
        ("compatible-top", COMPATIBLE_TOP),
        ("COMPATIBLE_SAFE_RECURSIVE", COMPATIBLE_SAFE_RECURSIVE),
        (" compatible-safe-top ", COMPATIBLE_SAFE_TOP),
        ("default", presets.DEFAULT),
    ],
)
def test_get_preset_by_name(name, expected):
    assert get_preset(name) is expected


def test_get_preset_unknown_name_lists_available():
    with pytest.raises(InvalidArgumentError, match="compatible-safe-top"):
        get_preset("legacy")


def test_presets_are_safe_for_concurrent_readers():
    errors = []

    def read_presets():
        try:
            for _ in range(200):
                for flag in SearchOption:
                    options = from_search_option(flag)
                    assert options.match_type == MatchType.WIN32
                    assert to_search_option(options) == flag
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=read_presets) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert not errors
