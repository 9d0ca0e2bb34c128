# tests/conftest.py
import os
from pathlib import Path
from unittest import mock

import pytest
from click.testing import CliRunner

from direnum.utils import system as direnum_system


@pytest.fixture
def runner() -> CliRunner:
    """Provides a Click CliRunner instance for invoking CLI commands."""
    return CliRunner()


@pytest.fixture
def config_dir(tmp_path: Path):
    """
    Changes the current working directory to an empty temporary directory for the
    duration of the test, so a `.direnum` file written there is picked up as the default config.
    """
    original_cwd = Path.cwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_cwd)


@pytest.fixture
def platform_case_sensitive(monkeypatch):
    """Makes PLATFORM_DEFAULT casing behave as on a case-sensitive filesystem."""
    monkeypatch.setattr("direnum.matching.is_case_sensitive_filesystem", lambda probe_dir=None: True)


@pytest.fixture
def platform_case_insensitive(monkeypatch):
    """Makes PLATFORM_DEFAULT casing behave as on a case-insensitive filesystem."""
    monkeypatch.setattr("direnum.matching.is_case_sensitive_filesystem", lambda probe_dir=None: False)


@pytest.fixture
def fresh_case_probe():
    """Clears the cached filesystem case-sensitivity probe before and after the test."""
    direnum_system._probe_case_sensitivity.cache_clear()
    yield
    direnum_system._probe_case_sensitivity.cache_clear()


@pytest.fixture
def mock_pyperclip(monkeypatch):
    """
    Mocks pyperclip.copy.
    The mock stores the copied text in clipboard_content["text"].
    Returns a tuple: (mock_copy_object, clipboard_content_dict).
    """
    mock_copy_object = mock.MagicMock()
    clipboard_content_dict = {"text": None}

    def custom_pyperclip_copy(text_to_copy):
        clipboard_content_dict["text"] = text_to_copy
        mock_copy_object(text_to_copy)

    monkeypatch.setattr("direnum.utils.clipboard.pyperclip.copy", custom_pyperclip_copy)
    return mock_copy_object, clipboard_content_dict
