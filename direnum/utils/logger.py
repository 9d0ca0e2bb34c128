# direnum/direnum/utils/logger.py
import logging
import pathlib

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_NAME = "direnum"

log_theme = Theme(
    {
        "log.path": "cyan",
        "log.matched": "green",
        "log.unmatched": "red",
        "log.warning": "yellow",
        "log.details": "grey50",
        "log.preset": "bold magenta",
        "log.summary_key": "bold",
        "log.summary_value_inc": "bold green",
        "log.summary_value_exc": "bold red",
        "log.summary_value_neutral": "bold blue",
    }
)

# Primary output (option dumps, match results) goes to stdout; diagnostics go to stderr.
stdout_console = Console(theme=log_theme, soft_wrap=True)
stderr_console = Console(theme=log_theme, stderr=True, soft_wrap=True)

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.DEBUG)
logger.propagate = False
# Silent until setup_logging() attaches console/file handlers.
logger.addHandler(logging.NullHandler())


def setup_logging(verbose_level: int = 0, quiet: bool = False, log_file_path: pathlib.Path | None = None) -> None:
    """
    Configures the direnum logger.

    :param verbose_level: 0 for WARNING, 1 for INFO, 2+ for DEBUG console output.
    :param quiet: Only ERROR and above reach the console. Overrides verbose_level.
    :param log_file_path: Optional file receiving every record at DEBUG level.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if quiet:
        console_level = logging.ERROR
    elif verbose_level >= 2:
        console_level = logging.DEBUG
    elif verbose_level == 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    console_handler = RichHandler(
        console=stderr_console,
        level=console_level,
        show_time=False,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    logger.addHandler(console_handler)

    if log_file_path:
        try:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file_path, mode="w", encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not open log file [log.path]{log_file_path}[/log.path]: {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s"))
            logger.addHandler(file_handler)
