"""Configuration management for broadcast-songs.

Handles loading and saving TOML configuration stored in:
- macOS/Linux: ~/.config/broadcast-songs/config.toml (XDG_CONFIG_HOME)
- Windows: %APPDATA%\\broadcast-songs\\config.toml
"""

import os
import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import tomli_w

from broadcast_songs.app.logging_config import get_logger

logger = get_logger(__name__)

APP_DIR_NAME = "broadcast-songs"
DEFAULT_REMOTE_SETLIST_URL = "https://example.com/setlist.json"
DEFAULT_PUSH_TOPIC = "broadcast"


def get_app_config_dir() -> Path:
    """Get the platform-specific config directory.

    Returns:
        Path to the config directory for broadcast-songs.
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / APP_DIR_NAME
        return Path.home() / "AppData" / "Roaming" / APP_DIR_NAME

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def get_app_config_path() -> Path:
    """Get the path to the config.toml file."""
    return get_app_config_dir() / "config.toml"


@dataclass
class AppConfig:
    """Configuration for broadcast-songs.

    Attributes:
        use_remote_setlist: Fetch the setlist from remote_setlist_url instead
            of reading the bundled asset
        remote_setlist_url: URL of the remote setlist JSON
        local_setlist_path: Setlist file to use instead of the bundled asset
        case_sensitive_titles: Match notification titles case-sensitively
        request_timeout_seconds: Timeout for the remote setlist fetch
        push_server: Base URL of the ntfy-compatible push server (empty disables push)
        push_topic: Topic to subscribe to for song broadcasts
        log_dir: Directory for session logs
    """

    # Setlist
    use_remote_setlist: bool = False
    remote_setlist_url: str = DEFAULT_REMOTE_SETLIST_URL
    local_setlist_path: Optional[Path] = None
    case_sensitive_titles: bool = False
    request_timeout_seconds: float = 10.0

    # Push
    push_server: str = ""
    push_topic: str = DEFAULT_PUSH_TOPIC

    # App
    log_dir: Path = field(default_factory=lambda: get_app_config_dir() / "logs")

    @property
    def push_enabled(self) -> bool:
        """Whether a push server is configured."""
        return bool(self.push_server)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "AppConfig":
        """Load configuration from TOML file.

        Args:
            path: Path to config file (defaults to standard location)

        Returns:
            AppConfig instance with loaded values

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        if path is None:
            path = get_app_config_path()

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "rb") as f:
            data = tomllib.load(f)

        config = cls()

        if "catalog" in data:
            catalog_data = data["catalog"]
            config.use_remote_setlist = catalog_data.get("use_remote_setlist", config.use_remote_setlist)
            config.remote_setlist_url = catalog_data.get("remote_setlist_url", config.remote_setlist_url)
            config.case_sensitive_titles = catalog_data.get("case_sensitive_titles", config.case_sensitive_titles)
            config.request_timeout_seconds = catalog_data.get(
                "request_timeout_seconds", config.request_timeout_seconds
            )
            if catalog_data.get("local_setlist_path"):
                config.local_setlist_path = Path(catalog_data["local_setlist_path"]).expanduser()

        if "push" in data:
            push_data = data["push"]
            config.push_server = push_data.get("server", config.push_server)
            config.push_topic = push_data.get("topic", config.push_topic)

        if "app" in data:
            app_data = data["app"]
            if "log_dir" in app_data:
                config.log_dir = Path(app_data["log_dir"]).expanduser()

        return config

    def save(self, path: Optional[Path] = None) -> None:
        """Save configuration to TOML file.

        Args:
            path: Path to save config (defaults to standard location)
        """
        if path is None:
            path = get_app_config_path()

        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "catalog": {
                "use_remote_setlist": self.use_remote_setlist,
                "remote_setlist_url": self.remote_setlist_url,
                # TOML has no null; empty string means the bundled asset
                "local_setlist_path": str(self.local_setlist_path) if self.local_setlist_path else "",
                "case_sensitive_titles": self.case_sensitive_titles,
                "request_timeout_seconds": self.request_timeout_seconds,
            },
            "push": {
                "server": self.push_server,
                "topic": self.push_topic,
            },
            "app": {
                "log_dir": str(self.log_dir),
            },
        }

        with open(path, "wb") as f:
            tomli_w.dump(data, f)


def ensure_app_config_exists(path: Optional[Path] = None) -> AppConfig:
    """Ensure config file exists, creating default if needed.

    Args:
        path: Config file location (defaults to standard location)

    Returns:
        AppConfig instance
    """
    if path is None:
        path = get_app_config_path()

    if path.exists():
        try:
            return AppConfig.load(path)
        except (tomllib.TOMLDecodeError, TypeError, ValueError) as e:
            logger.warning(f"Config at {path} is unreadable, recreating defaults: {e}")

    config = AppConfig()
    config.save(path)
    return config
