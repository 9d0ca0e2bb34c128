# direnum/direnum/utils/system.py
import functools
import os
import platform
import tempfile
from pathlib import Path

from direnum.utils.logger import logger


def platform_default_case_sensitivity() -> bool:
    """Case sensitivity conventionally used by the host OS's default filesystem."""
    return platform.system() not in ("Windows", "Darwin")


@functools.lru_cache(maxsize=None)
def _probe_case_sensitivity(probe_dir: str) -> bool:
    fd, lower_path = tempfile.mkstemp(prefix="direnum_case_probe_", dir=probe_dir)
    os.close(fd)
    try:
        probe = Path(lower_path)
        upper = probe.with_name(probe.name.upper())
        # The lower-case name exists; if the upper-case spelling resolves too, names fold.
        return not upper.exists()
    finally:
        os.unlink(lower_path)


def is_case_sensitive_filesystem(probe_dir: str | os.PathLike | None = None) -> bool:
    """
    Reports whether names in `probe_dir` (the temporary directory by default) compare case-sensitively.
    Probes once per directory. Falls back to the platform convention if the probe cannot run.
    """
    directory = os.fspath(probe_dir) if probe_dir is not None else tempfile.gettempdir()
    try:
        return _probe_case_sensitivity(directory)
    except OSError as e:
        fallback = platform_default_case_sensitivity()
        logger.debug(
            f"System: Could not probe case sensitivity of [log.path]{directory}[/log.path]: {e}. "
            f"Assuming {'case-sensitive' if fallback else 'case-insensitive'} names."
        )
        return fallback
