"""Tests for TOML configuration loading and the structured logger."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from shared.config import ClipCryptConfig
from shared.logger import CryptLogger, _JSONFormatter
from clipcrypt.core.errors import (
    DecryptionFailed,
    InvalidBase64,
    NoClipboardTool,
    user_message_for,
)


class TestConfig:
    def test_defaults(self):
        cfg = ClipCryptConfig()
        assert cfg.clipboard.tools == ["wl-copy", "xclip", "xsel"]
        assert cfg.clipboard.exec_timeout == 4.0
        assert cfg.clipboard.auto_clear_delay == 11.0
        assert cfg.editor.mask_char == "*"
        assert cfg.global_settings.uniform_errors is False

    def test_load_merges_sections_and_ignores_unknown_keys(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text(
            '[clipboard]\ntools = ["xsel"]\nauto_clear = false\nbogus = 1\n'
            '[editor]\nmask_char = "#"\n'
            "[mystery]\nx = 1\n"
        )
        cfg = ClipCryptConfig.load(path)

        assert cfg.clipboard.tools == ["xsel"]
        assert cfg.clipboard.auto_clear is False
        assert cfg.clipboard.exec_timeout == 4.0
        assert cfg.editor.mask_char == "#"

    def test_explicit_missing_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ClipCryptConfig.load(tmp_path / "absent.toml")

    def test_to_dict(self):
        assert ClipCryptConfig().to_dict()["clipboard"]["auto_clear"] is True

    def test_load_accepts_string_path(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text('[global]\nlog_level = "DEBUG"\n')
        assert ClipCryptConfig.load(str(path)).global_settings.log_level == "DEBUG"


class TestUserMessages:
    def test_distinct_by_default(self):
        assert user_message_for(DecryptionFailed()) != user_message_for(InvalidBase64())

    def test_uniform_collapses_decrypt_errors_only(self):
        assert user_message_for(DecryptionFailed(), uniform=True) == user_message_for(
            InvalidBase64(), uniform=True
        )
        assert user_message_for(NoClipboardTool(), uniform=True) == NoClipboardTool.user_message


class TestLogger:
    def test_fields_and_operation_reach_json(self, tmp_path):
        log_file = tmp_path / "logs" / "clipcrypt.log"
        log = CryptLogger("test", log_level="INFO", log_file=log_file,
                          json_logs=True, console_output=False)
        with log.operation("copy"):
            log.info("Clipboard written", tool="xclip")

        entry = json.loads(log_file.read_text().strip())
        assert entry["logger"] == "clipcrypt.test"
        assert entry["operation"] == "copy"
        assert entry["fields"] == {"tool": "xclip"}

    def test_json_formatter_includes_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "m", None, sys.exc_info())
        assert "ValueError" in json.loads(_JSONFormatter().format(record))["exc_info"]

    def test_debug_flag_lowers_level(self):
        cfg = ClipCryptConfig()
        cfg.global_settings.debug = True
        log = CryptLogger.from_config("dbg", cfg)
        assert log.underlying.level == logging.DEBUG
