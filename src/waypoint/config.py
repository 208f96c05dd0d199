"""Configuration loading and defaults for Waypoint."""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

RECORD_MODES = ("highlight", "select")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_config_dir() -> Path:
    """Get the waypoint config directory (XDG-style)."""
    return Path.home() / ".config" / "waypoint"


def get_config_path() -> Path:
    """Get the config file path."""
    return get_config_dir() / "config.toml"


def get_default_data_dir() -> Path:
    """Get the default data directory for logs."""
    return Path.home() / ".local" / "share" / "waypoint"


@dataclass
class ItemsConfig:
    """Which files show up in the item list."""

    extensions: list[str] = field(default_factory=lambda: [".md", ".txt"])
    recursive: bool = True
    max_display: int = 500


@dataclass
class HistoryConfig:
    """Selection history behaviour."""

    # "highlight" records every cursor move, "select" only Enter/click
    record_on: Literal["highlight", "select"] = "highlight"


@dataclass
class WatcherConfig:
    """Directory watcher configuration."""

    enabled: bool = True
    debounce_seconds: float = 0.5


@dataclass
class LoggingConfig:
    """Log file configuration."""

    level: str = "INFO"
    file: str = "waypoint.log"  # relative to data_directory, empty = disabled

    @property
    def level_number(self) -> int:
        return getattr(logging, self.level)


@dataclass
class Config:
    """Application configuration."""

    scan_directory: Path = field(default_factory=lambda: Path.home() / "Documents")
    data_directory: Path = field(default_factory=lambda: get_default_data_dir())
    items: ItemsConfig = field(default_factory=ItemsConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    watcher: WatcherConfig = field(default_factory=WatcherConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def get_log_path(self) -> Path | None:
        """Get the log file path, or None if file logging is disabled."""
        if not self.logging.file:
            return None
        return self.data_directory / self.logging.file

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file or create defaults."""
        config_path = get_config_path()

        # Ensure config directory exists
        config_dir = get_config_dir()
        config_dir.mkdir(parents=True, exist_ok=True)

        if not config_path.exists():
            # Create default config file
            default_config = cls()
            default_config.data_directory.mkdir(parents=True, exist_ok=True)
            default_config.save()
            return default_config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        scan_dir = data.get("scan_directory", "~/Documents")
        scan_directory = Path(scan_dir).expanduser()

        data_dir = data.get("data_directory", str(get_default_data_dir()))
        data_directory = Path(data_dir).expanduser()

        items_data = data.get("items", {})
        items = ItemsConfig(
            extensions=[
                _normalize_extension(ext)
                for ext in items_data.get("extensions", [".md", ".txt"])
            ],
            recursive=items_data.get("recursive", True),
            max_display=items_data.get("max_display", 500),
        )

        history_data = data.get("history", {})
        record_on = history_data.get("record_on", "highlight")
        if record_on not in RECORD_MODES:
            record_on = "highlight"
        history = HistoryConfig(record_on=record_on)

        watcher_data = data.get("watcher", {})
        watcher = WatcherConfig(
            enabled=watcher_data.get("enabled", True),
            debounce_seconds=float(watcher_data.get("debounce_seconds", 0.5)),
        )

        logging_data = data.get("logging", {})
        level = str(logging_data.get("level", "INFO")).upper()
        if level not in LOG_LEVELS:
            level = "INFO"
        log_config = LoggingConfig(
            level=level,
            file=logging_data.get("file", "waypoint.log"),
        )

        config = cls(
            scan_directory=scan_directory,
            data_directory=data_directory,
            items=items,
            history=history,
            watcher=watcher,
            logging=log_config,
        )

        # Ensure data directory exists
        config.data_directory.mkdir(parents=True, exist_ok=True)

        return config

    def save(self) -> None:
        """Save configuration to file."""
        config_path = get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        extensions_str = ", ".join(f'"{ext}"' for ext in self.items.extensions)

        # Build TOML content manually (tomllib is read-only)
        lines = [
            '# Waypoint Configuration',
            '',
            '# Directory whose files are listed for selection',
            f'scan_directory = "{self.scan_directory}"',
            '',
            '# Directory for the log file',
            '# Default: ~/.local/share/waypoint',
            f'data_directory = "{self.data_directory}"',
            '',
            '[items]',
            f'extensions = [{extensions_str}]  # empty = every file',
            f'recursive = {str(self.items.recursive).lower()}',
            f'max_display = {self.items.max_display}',
            '',
            '# When a selection is added to history: "highlight" or "select"',
            '[history]',
            f'record_on = "{self.history.record_on}"',
            '',
            '# Refresh the item list when files change on disk',
            '[watcher]',
            f'enabled = {str(self.watcher.enabled).lower()}',
            f'debounce_seconds = {self.watcher.debounce_seconds}',
            '',
            '[logging]',
            f'level = "{self.logging.level}"',
            f'file = "{self.logging.file}"  # empty = no log file',
        ]

        config_path.write_text("\n".join(lines) + "\n")


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext
