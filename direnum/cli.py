import json
import pathlib
import time
from typing import Callable, List, Tuple

import click
from rich.markup import escape

from direnum import formatter as direnum_formatter
from direnum.constants import TOOL_NAME, TOOL_VERSION, FileAttributes, MatchResult, SearchOption, parse_search_option
from direnum.errors import DirEnumError
from direnum.formatter import format_match_result_for_cli
from direnum.matching import matches_pattern
from direnum.options import EnumerationOptions
from direnum.presets import PRESETS, from_search_option, to_search_option
from direnum.utils import clipboard as direnum_clipboard
from direnum.utils import config as direnum_config
from direnum.utils import logger as direnum_logger

ATTRIBUTE_CHOICES = [flag.name.lower() for flag in FileAttributes if flag.value] + ["none"]
SEARCH_OPTION_CHOICES = ["TopDirectoryOnly", "AllDirectories"]

FAMILY_NOTE = (
    "compatible-* and compatible-safe-* differ only in ignore_inaccessible. "
    "Legacy flag conversion returns the safe family unless --no-safe is given."
)


def _enumeration_options(f: Callable) -> Callable:
    """Adds the option-field flags shared by the show and convert commands."""
    decorators = [
        click.option(
            "--preset",
            type=click.Choice(list(PRESETS), case_sensitive=False),
            default=None,
            help="Start from a named preset instead of the recommended defaults.",
        ),
        click.option(
            "--search-option",
            type=click.Choice(SEARCH_OPTION_CHOICES, case_sensitive=False),
            default=None,
            help="Start from the compatible preset for a legacy recursion flag.",
        ),
        click.option(
            "--safe/--no-safe",
            default=True,
            show_default=True,
            help="With --search-option: pick the preset family that skips inaccessible entries.",
        ),
        click.option(
            "--recurse/--no-recurse",
            "recurse_subdirectories",
            default=None,
            help="Recurse into subdirectories. Default: false.",
        ),
        click.option(
            "--ignore-inaccessible/--no-ignore-inaccessible",
            default=None,
            help="Skip entries when access is denied instead of reporting an error. Default: true.",
        ),
        click.option(
            "--buffer-size",
            type=click.IntRange(min=0),
            default=None,
            help="Suggested buffer size in bytes for the enumerator. 0 means no suggestion.",
        ),
        click.option(
            "--skip-attr",
            "attributes_to_skip",
            multiple=True,
            type=click.Choice(ATTRIBUTE_CHOICES, case_sensitive=False),
            help="File attribute to skip. Can be used multiple times; 'none' disables filtering. Default: hidden, system.",
        ),
        click.option(
            "--match-type",
            type=click.Choice(["simple", "win32"], case_sensitive=False),
            default=None,
            help="Wildcard dialect for name patterns. Default: simple.",
        ),
        click.option(
            "--match-casing",
            type=click.Choice(["platform_default", "case_sensitive", "case_insensitive"], case_sensitive=False),
            default=None,
            help="Case handling for name patterns. Default: platform_default.",
        ),
        click.option(
            "--max-depth",
            "max_recursion_depth",
            type=click.IntRange(min=0),
            default=None,
            show_default="unlimited",
            help="Maximum directory depth to recurse. Depth 0 returns the starting directory's contents only.",
        ),
        click.option(
            "--special-dirs/--no-special-dirs",
            "return_special_directories",
            default=None,
            help="Return the special entries '.' and '..'. Default: false.",
        ),
    ]
    for decorator in reversed(decorators):
        f = decorator(f)
    return f


def _output_options(f: Callable) -> Callable:
    f = click.option(
        "--clipboard/--no-clipboard",
        "-c",
        default=False,
        show_default=True,
        help="Copy the rendered output to the system clipboard.",
    )(f)
    f = click.option(
        "--output",
        "-o",
        type=click.Path(dir_okay=False, writable=True, path_type=pathlib.Path),
        default=None,
        help="Write the output to this file instead of standard output.",
    )(f)
    f = click.option(
        "--format",
        "-f",
        type=click.Choice(list(direnum_formatter.FORMATTERS), case_sensitive=False),
        default="table",
        show_default=True,
        help="Output format.",
    )(f)
    return f


def _merged_settings(ctx: click.Context) -> direnum_config.Settings:
    return direnum_config.merge_config(ctx.params.copy(), ctx.obj["config_values"], ctx)


def _resolve_options(ctx: click.Context) -> Tuple[EnumerationOptions, direnum_config.Settings]:
    """Merges command parameters with the config profile and builds the options they describe."""
    final_settings = _merged_settings(ctx)

    def given_on_command_line(key: str) -> bool:
        source = ctx.get_parameter_source(key)
        return source is not None and source.name == "COMMANDLINE"

    # A base chosen on the command line replaces whichever base the config file names.
    for chosen, other in (("preset", "search_option"), ("search_option", "preset")):
        if given_on_command_line(chosen) and not given_on_command_line(other):
            final_settings.pop(other, None)

    direnum_logger.logger.debug(f"CLI: Final effective settings after merge: {escape(repr(final_settings))}")
    try:
        return direnum_config.build_options(final_settings), final_settings
    except (DirEnumError, TypeError) as e:
        raise click.UsageError(str(e), ctx=ctx) from e


def _output_settings(
    ctx: click.Context, final_settings: direnum_config.Settings
) -> Tuple[str, pathlib.Path | None, bool]:
    """Returns (format, output, clipboard) after config file values have been merged in."""
    final_format = str(final_settings.get("format") or "table").lower()
    if final_format not in direnum_formatter.FORMATTERS:
        raise click.UsageError(f"Invalid format '{final_format}'.", ctx=ctx)

    final_output = final_settings.get("output")
    if isinstance(final_output, str):
        final_output = pathlib.Path(final_output)
    return final_format, final_output, bool(final_settings.get("clipboard", False))


def _write_output(rendered: str, output: pathlib.Path | None, clipboard: bool) -> None:
    log = direnum_logger.logger
    try:
        if output:
            output.parent.mkdir(parents=True, exist_ok=True)
            with open(output, "w", encoding="utf-8") as f_out:
                f_out.write(rendered)
            log.info(f"CLI: Output written to [log.path]{output}[/log.path]")
        else:
            text = rendered if rendered.endswith("\n") or not rendered else rendered + "\n"
            direnum_logger.stdout_console.print(text, end="", markup=False, highlight=False)
    except OSError as e:
        log.error(f"CLI: Error writing output. Type: {type(e).__name__}, Message: {escape(str(e))}", exc_info=True)
        raise click.FileError(str(output), hint=str(e)) from e

    if clipboard:
        if direnum_clipboard.copy_to_clipboard(rendered):
            log.info("CLI: Copied output to clipboard.")
    else:
        log.debug("CLI: Clipboard copy disabled.")


def _log_finished(ctx: click.Context) -> None:
    start_time = ctx.obj.get("start_time")
    if start_time is not None:
        direnum_logger.logger.info(
            f"[log.summary_key]Execution time:[/log.summary_key] "
            f"[log.summary_value_neutral]{time.monotonic() - start_time:.3f} seconds[/log.summary_value_neutral]"
        )


@click.group(
    name=TOOL_NAME,
    context_settings=dict(help_option_names=["-h", "--help"]),
    help="Builds, inspects and converts directory enumeration options, and evaluates wildcard name matching.",
)
@click.version_option(version=TOOL_VERSION, prog_name=TOOL_NAME, message="%(prog)s version %(version)s")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity. -v for INFO, -vv for DEBUG console output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress all console output below ERROR level. Overrides -v.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=pathlib.Path),
    default=None,
    help="Path to a file for detailed logging. All logs (including DEBUG level) are written here.",
)
@click.option(
    "--config",
    "config_path_cli",
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=pathlib.Path),
    default=None,
    help="Configuration file path. If omitted, ./.direnum is used when present.",
)
@click.option(
    "--profile",
    default=direnum_config.DEFAULT_PROFILE,
    show_default=True,
    help="Profile section of the configuration file to use.",
)
@click.pass_context
def main_cli(
    ctx: click.Context,
    verbose: int,
    quiet: bool,
    log_file: pathlib.Path | None,
    config_path_cli: pathlib.Path | None,
    profile: str,
):
    cfg_file_values = direnum_config.load_config_file(config_path_cli, profile)
    final_settings = direnum_config.merge_config(
        {"verbose": verbose, "quiet": quiet, "log_file": log_file}, cfg_file_values, ctx
    )

    final_log_file = final_settings.get("log_file")
    if isinstance(final_log_file, str):
        final_log_file = pathlib.Path(final_log_file)
    direnum_logger.setup_logging(
        verbose_level=final_settings.get("verbose", 0) or 0,
        quiet=bool(final_settings.get("quiet", False)),
        log_file_path=final_log_file,
    )

    ctx.obj = {"config_values": cfg_file_values, "start_time": time.monotonic()}
    direnum_logger.logger.debug(f"CLI: Config profile '{escape(profile)}' values: {escape(repr(cfg_file_values))}")


@main_cli.command("show")
@_enumeration_options
@_output_options
@click.pass_context
def show_cmd(
    ctx: click.Context,
    preset: str | None,
    search_option: str | None,
    safe: bool,
    recurse_subdirectories: bool | None,
    ignore_inaccessible: bool | None,
    buffer_size: int | None,
    attributes_to_skip: Tuple[str, ...],
    match_type: str | None,
    match_casing: str | None,
    max_recursion_depth: int | None,
    return_special_directories: bool | None,
    format: str,
    output: pathlib.Path | None,
    clipboard: bool,
):
    """Resolve enumeration options from a preset, legacy flag, config file and flags, and print them."""
    options, final_settings = _resolve_options(ctx)
    final_format, final_output, final_clipboard = _output_settings(ctx, final_settings)

    source = final_settings.get("preset") or (
        f"search_option={final_settings['search_option']}" if final_settings.get("search_option") else "defaults"
    )
    formatter_cls = direnum_formatter.FORMATTERS[final_format]
    rendered = formatter_cls({"source": source}).format({"options": options})
    _write_output(rendered, final_output, final_clipboard)
    _log_finished(ctx)


@main_cli.command("presets")
@_output_options
@click.pass_context
def presets_cmd(ctx: click.Context, format: str, output: pathlib.Path | None, clipboard: bool):
    """List every named preset side by side."""
    final_format, final_output, final_clipboard = _output_settings(ctx, _merged_settings(ctx))
    formatter_cls = direnum_formatter.FORMATTERS[final_format]
    rendered = formatter_cls({"note": FAMILY_NOTE}).format(dict(PRESETS))
    _write_output(rendered, final_output, final_clipboard)
    _log_finished(ctx)


@main_cli.command("convert")
@click.argument("flag", required=False, metavar="[FLAG]")
@click.option(
    "--to-flag",
    is_flag=True,
    help="Convert resolved options to the legacy flag instead of converting FLAG to options.",
)
@_enumeration_options
@_output_options
@click.pass_context
def convert_cmd(
    ctx: click.Context,
    flag: str | None,
    to_flag: bool,
    preset: str | None,
    search_option: str | None,
    safe: bool,
    recurse_subdirectories: bool | None,
    ignore_inaccessible: bool | None,
    buffer_size: int | None,
    attributes_to_skip: Tuple[str, ...],
    match_type: str | None,
    match_casing: str | None,
    max_recursion_depth: int | None,
    return_special_directories: bool | None,
    format: str,
    output: pathlib.Path | None,
    clipboard: bool,
):
    """
    Convert a legacy recursion FLAG (TopDirectoryOnly/AllDirectories or 0/1) to its compatible preset,
    or with --to-flag reduce resolved options to the legacy flag. Both conversions are lossy.
    """
    log = direnum_logger.logger

    if to_flag:
        if flag is not None:
            raise click.UsageError("FLAG cannot be combined with --to-flag.", ctx=ctx)
        options, final_settings = _resolve_options(ctx)
        final_format, final_output, final_clipboard = _output_settings(ctx, final_settings)
        result_flag = to_search_option(options)
        log.info(f"CLI: recurse_subdirectories={options.recurse_subdirectories} -> {result_flag.name}")
        if final_format == "json":
            rendered = json.dumps({"search_option": result_flag.name, "value": int(result_flag)})
        else:
            rendered = f"{result_flag.name} ({int(result_flag)})"
        _write_output(rendered, final_output, final_clipboard)
        _log_finished(ctx)
        return

    if flag is None:
        raise click.UsageError("Missing argument 'FLAG' (or pass --to-flag).", ctx=ctx)

    final_settings = _merged_settings(ctx)
    final_format, final_output, final_clipboard = _output_settings(ctx, final_settings)
    try:
        parsed_flag: SearchOption = parse_search_option(int(flag) if flag.lstrip("-").isdecimal() else flag)
    except (DirEnumError, ValueError) as e:
        raise click.BadParameter(
            f"Argument out of range for search_option: {flag!r}", ctx=ctx, param_hint="'FLAG'"
        ) from e

    final_safe = final_settings.get("safe", safe)
    if not isinstance(final_safe, bool):
        raise click.UsageError(f"Config value 'safe' must be true or false (got {final_safe!r}).", ctx=ctx)
    preset_options = from_search_option(parsed_flag, safe=final_safe)
    preset_name = next(name for name, options in PRESETS.items() if options is preset_options)
    log.info(f"CLI: {parsed_flag.name} -> preset [log.preset]{preset_name}[/log.preset]")

    formatter_cls = direnum_formatter.FORMATTERS[final_format]
    rendered = formatter_cls({"source": f"search_option={parsed_flag.name}"}).format({preset_name: preset_options})
    _write_output(rendered, final_output, final_clipboard)
    _log_finished(ctx)


@main_cli.command("match")
@click.argument("pattern")
@click.argument("names", nargs=-1, required=True)
@click.option(
    "--preset",
    type=click.Choice(list(PRESETS), case_sensitive=False),
    default=None,
    help="Take match type and casing from a named preset.",
)
@click.option(
    "--match-type",
    "-t",
    type=click.Choice(["simple", "win32"], case_sensitive=False),
    default=None,
    help="Wildcard dialect. Default: simple (or the preset's).",
)
@click.option(
    "--match-casing",
    type=click.Choice(["platform_default", "case_sensitive", "case_insensitive"], case_sensitive=False),
    default=None,
    help="Case handling. Default: platform_default (or the preset's).",
)
@click.pass_context
def match_cmd(
    ctx: click.Context,
    pattern: str,
    names: Tuple[str, ...],
    preset: str | None,
    match_type: str | None,
    match_casing: str | None,
):
    """
    Test each NAME against PATTERN. Exits with status 0 if at least one name matched, 1 otherwise.
    """
    log = direnum_logger.logger
    options, _ = _resolve_options(ctx)

    results: List[MatchResult] = []
    for name in names:
        matched = matches_pattern(name, pattern, options.match_type, options.match_casing)
        results.append(
            {
                "name": name,
                "pattern": pattern,
                "match_type": options.match_type.name,
                "match_casing": options.match_casing.name,
                "matched": matched,
            }
        )

    for result in results:
        direnum_logger.stdout_console.print(format_match_result_for_cli(result), highlight=False)

    matched_count = sum(1 for result in results if result["matched"])
    log.info(
        f"[log.summary_key]Names matched:[/log.summary_key] "
        f"[log.summary_value_inc]{matched_count}[/log.summary_value_inc] of {len(results)}"
    )
    _log_finished(ctx)
    ctx.exit(0 if matched_count else 1)
