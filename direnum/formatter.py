# direnum/direnum/formatter.py
import datetime
import io
import json
import re
from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from direnum.constants import DEFAULT_MAX_RECURSION_DEPTH, TOOL_NAME, TOOL_VERSION, MatchResult
from direnum.options import FIELD_NAMES, EnumerationOptions

Metadata = Dict[str, Any]
OptionSets = Dict[str, EnumerationOptions]  # Display name -> options, rendered in insertion order

# Strips "[log.xxx]", "[bold green]" and their closing tags for length calculation
RICH_TAG_RE = re.compile(r"\[/?(?:log\.[^\]]+|bold [a-z]+)\]")

# Column the colon of a match line is aligned to
TARGET_COL = 24


def format_match_result_for_cli(result: MatchResult) -> str:
    """
    Formats one match result into a Rich-markup line for CLI display,
    aligning the colon so names line up in a column.
    """
    if result["matched"]:
        status_symbol = "[bold green]✔[/bold green]"
        status_tag = "log.matched"
        display_status = "Matched"
    else:
        status_symbol = "[bold red]✘[/bold red]"
        status_tag = "log.unmatched"
        display_status = "No match"

    left_part = f"[{status_tag}]{status_symbol} {display_status}[/{status_tag}]"
    visible_length = len(RICH_TAG_RE.sub("", left_part))
    padding = " " * (TARGET_COL - visible_length) if visible_length < TARGET_COL else ""

    details = (
        f"Pattern: '{escape(result['pattern'])}', "
        f"Type: {result['match_type']}, Casing: {result['match_casing']}"
    )
    return f"{left_part}{padding}: [log.path]{escape(result['name'])}[/log.path] ([log.details]{details}[/log.details])"


def _display_value(field_name: str, value: Any) -> str:
    """Human-readable rendering of a to_dict() value."""
    if field_name == "attributes_to_skip":
        return ", ".join(value) if value else "none"
    if field_name == "max_recursion_depth" and value == DEFAULT_MAX_RECURSION_DEPTH:
        return "unlimited"
    if field_name == "buffer_size" and value == 0:
        return "0 (no suggestion)"
    return str(value)


class BaseFormatter:
    """Base class for option set formatters."""

    def __init__(self, cli_metadata: Metadata | None = None):
        self.core_metadata = dict(cli_metadata or {})
        self.final_metadata: Metadata = self._prepare_final_metadata()

    def _prepare_final_metadata(self) -> Metadata:
        meta = dict(self.core_metadata)
        meta["tool_version"] = TOOL_VERSION
        meta["created_at"] = datetime.datetime.now().isoformat()
        return meta

    def format(self, option_sets: OptionSets) -> str:
        """Formats one or more named option sets into a string."""
        raise NotImplementedError("Subclasses must implement this method.")


class JsonFormatter(BaseFormatter):
    """Formats option sets as JSON."""

    def format(self, option_sets: OptionSets) -> str:
        output_data = {
            "metadata": self.final_metadata,
            "options": {name: options.to_dict() for name, options in option_sets.items()},
        }
        return json.dumps(output_data, indent=2)


class MarkdownFormatter(BaseFormatter):
    """Formats option sets as a Markdown table, one column per option set."""

    def format(self, option_sets: OptionSets) -> str:
        md_lines: List[str] = []
        md_lines.append("# Enumeration Options")
        md_lines.append(
            f"\n*Generated by {TOOL_NAME} v{self.final_metadata['tool_version']} on {self.final_metadata['created_at']}*"
        )
        note = self.final_metadata.get("note")
        if note:
            md_lines.append(f"\n> {note}")

        names = list(option_sets)
        dicts = [option_sets[name].to_dict() for name in names]
        md_lines.append("")
        md_lines.append("| Option | " + " | ".join(f"`{name}`" for name in names) + " |")
        md_lines.append("|---|" + "---|" * len(names))
        for field_name in FIELD_NAMES:
            cells = [_display_value(field_name, d[field_name]) for d in dicts]
            md_lines.append(f"| `{field_name}` | " + " | ".join(cells) + " |")

        md_lines.append("")
        return "\n".join(md_lines)


class TableFormatter(BaseFormatter):
    """Formats option sets as a plain-text table rendered by Rich."""

    def __init__(self, cli_metadata: Metadata | None = None, width: int = 120):
        super().__init__(cli_metadata)
        self.width = width

    def format(self, option_sets: OptionSets) -> str:
        table = Table(title="Enumeration Options", caption=self.final_metadata.get("note"))
        table.add_column("Option", style="bold")
        for name in option_sets:
            table.add_column(name)

        dicts = [options.to_dict() for options in option_sets.values()]
        for field_name in FIELD_NAMES:
            table.add_row(field_name, *[_display_value(field_name, d[field_name]) for d in dicts])

        # Render without colors so the result can be written to files and the clipboard.
        console = Console(file=io.StringIO(), width=self.width, color_system=None, force_terminal=False)
        with console.capture() as capture:
            console.print(table)
        return capture.get()


FORMATTERS = {
    "table": TableFormatter,
    "json": JsonFormatter,
    "markdown": MarkdownFormatter,
}
