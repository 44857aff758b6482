"""
ClipCrypt Configuration Management
===================================

Centralized configuration for the ClipCrypt tool using Python
dataclasses and TOML-based persistence.

Configuration is kept apart from code so that clipboard tool order,
auto-clear timing, and editor cosmetics can be tuned per machine
without touching the package.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Default configuration file path relative to the ClipCrypt root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Section Configs ================================


@dataclass(frozen=False, slots=True)
class EditorConfig:
    """Configuration for the secure line editor.

    Controls the mask character and the live indicators drawn in front
    of the masked input.
    """

    mask_char: str = "*"
    locale_label: str = "[한글]"
    caps_label: str = "[CAPS]"
    indicator_style: str = "red"
    caps_lock_glob: str = "/sys/class/leds/input*::capslock/brightness"


@dataclass(frozen=False, slots=True)
class ClipboardConfig:
    """Configuration for the clipboard lifecycle.

    ``tools`` is the ordered list of external clipboard programs to try;
    names must match entries in :data:`clipcrypt.clipboard.tools.KNOWN_TOOLS`.
    """

    tools: list[str] = field(
        default_factory=lambda: ["wl-copy", "xclip", "xsel"]
    )
    exec_timeout: float = 4.0
    auto_clear: bool = True
    auto_clear_delay: float = 11.0


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging and error presentation."""

    log_level: str = "WARNING"
    log_file: str | None = None
    log_json: bool = False
    uniform_errors: bool = False
    debug: bool = False
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class ClipCryptConfig:
    """Master configuration aggregating all section settings.

    Usage:
        >>> config = ClipCryptConfig.load()                 # from default path
        >>> config = ClipCryptConfig.load("custom.toml")    # from custom path
        >>> config.clipboard.auto_clear_delay
        11.0
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)
    clipboard: ClipboardConfig = field(default_factory=ClipboardConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> ClipCryptConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`ClipCryptConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            editor=cls._build_section(EditorConfig, raw.get("editor", {})),
            clipboard=cls._build_section(ClipboardConfig, raw.get("clipboard", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that newer config
        files do not break older code.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)

