# direnum/direnum/utils/config.py
import pathlib
from typing import Any, Dict

import click
import yaml
from rich.markup import escape

from direnum.constants import DEFAULT_CONFIG_FILENAME, parse_search_option
from direnum.errors import InvalidArgumentError
from direnum.options import FIELD_NAMES, EnumerationOptions
from direnum.presets import from_search_option, get_preset
from direnum.utils.logger import logger

DEFAULT_PROFILE = "default"

Settings = Dict[str, Any]


def load_config_file(config_path: pathlib.Path | None = None, profile: str = DEFAULT_PROFILE) -> Settings:
    """
    Loads one profile from a YAML config file.

    If `config_path` is None, ./.direnum is used when present. A file without profile
    sections (no top-level `default:` mapping) is read as a single flat profile.
    Missing, unreadable or malformed files yield an empty dict.
    """
    path = config_path if config_path is not None else pathlib.Path.cwd() / DEFAULT_CONFIG_FILENAME
    if not path.is_file():
        if config_path is not None:
            logger.warning(f"Config: File [log.path]{path}[/log.path] not found. Using defaults.")
        else:
            logger.debug(f"Config: No {DEFAULT_CONFIG_FILENAME} in current directory.")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Config: Could not load [log.path]{path}[/log.path]: {escape(str(e))}")
        return {}

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning(f"Config: [log.path]{path}[/log.path] does not contain a mapping. Ignoring it.")
        return {}

    if isinstance(raw.get(profile), dict):
        settings = dict(raw[profile])
    elif DEFAULT_PROFILE in raw or profile != DEFAULT_PROFILE:
        logger.warning(f"Config: Profile '{escape(profile)}' not found in [log.path]{path}[/log.path].")
        return {}
    else:
        settings = dict(raw)

    logger.debug(f"Config: Loaded profile '{escape(profile)}' from {path}: {escape(repr(settings))}")
    return settings


def merge_config(cli_params: Settings, cfg_values: Settings, ctx: click.Context) -> Settings:
    """
    Combines command-line parameters with config file values.
    Explicit command-line values win over the file; file values win over click defaults.
    """
    merged: Settings = {}
    for key, value in cli_params.items():
        source = ctx.get_parameter_source(key)
        from_command_line = source is not None and source.name not in ("DEFAULT", "DEFAULT_MAP")
        if not from_command_line and key in cfg_values:
            merged[key] = cfg_values[key]
        else:
            merged[key] = value
    for key, value in cfg_values.items():
        merged.setdefault(key, value)
    return merged


def build_options(settings: Settings) -> EnumerationOptions:
    """
    Resolves an EnumerationOptions instance from merged settings.

    The base comes from `preset`, else from `search_option` (legacy flag), else the
    recommended defaults. Every option field present and not None then overrides it.
    """
    preset_name = settings.get("preset")
    search_option = settings.get("search_option")
    if preset_name and search_option is not None:
        raise InvalidArgumentError("Use either 'preset' or 'search_option', not both")

    if preset_name:
        base = get_preset(str(preset_name))
        logger.debug(f"Config: Starting from preset [log.preset]{escape(str(preset_name))}[/log.preset]")
    elif search_option is not None:
        flag = parse_search_option(search_option)
        base = from_search_option(flag, safe=settings.get("safe", True))
        logger.debug(f"Config: Starting from legacy flag {flag.name}")
    else:
        base = EnumerationOptions()

    overrides = {
        name: settings[name]
        for name in FIELD_NAMES
        if name in settings and settings[name] is not None and settings[name] != ()
    }
    options = EnumerationOptions.from_dict(overrides, base=base)
    logger.debug(f"Config: Resolved options {escape(repr(options))}")
    return options
