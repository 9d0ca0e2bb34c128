# tests/test_system.py
import logging

from direnum.utils import system as direnum_system


def test_probe_reflects_directory_behavior(tmp_path, fresh_case_probe):
    (tmp_path / "casecheck").write_text("x")
    folds_case = (tmp_path / "CASECHECK").exists()
    (tmp_path / "casecheck").unlink()

    assert direnum_system.is_case_sensitive_filesystem(tmp_path) is (not folds_case)
    # The probe file is removed again.
    assert list(tmp_path.iterdir()) == []


def test_probe_is_cached_per_directory(tmp_path, fresh_case_probe, monkeypatch):
    first = direnum_system.is_case_sensitive_filesystem(tmp_path)

    def fail(*args, **kwargs):
        raise AssertionError("probe should not run twice for the same directory")

    monkeypatch.setattr(direnum_system.tempfile, "mkstemp", fail)
    assert direnum_system.is_case_sensitive_filesystem(tmp_path) is first


def test_probe_failure_falls_back_to_platform_convention(tmp_path, fresh_case_probe, monkeypatch, caplog):
    def raise_os_error(*args, **kwargs):
        raise PermissionError("read-only temp dir")

    monkeypatch.setattr(direnum_system.tempfile, "mkstemp", raise_os_error)
    monkeypatch.setattr(direnum_system.platform, "system", lambda: "Windows")
    caplog.set_level(logging.DEBUG, logger="direnum")
    direnum_system.logger.propagate = True
    try:
        assert direnum_system.is_case_sensitive_filesystem(tmp_path) is False
    finally:
        direnum_system.logger.propagate = False
    assert "Could not probe case sensitivity" in caplog.text
    # Host probing is a library concern and stays at DEBUG.
    assert {record.levelno for record in caplog.records} == {logging.DEBUG}


def test_platform_convention(monkeypatch):
    monkeypatch.setattr(direnum_system.platform, "system", lambda: "Linux")
    assert direnum_system.platform_default_case_sensitivity() is True
    monkeypatch.setattr(direnum_system.platform, "system", lambda: "Darwin")
    assert direnum_system.platform_default_case_sensitivity() is False
