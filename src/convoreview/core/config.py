"""Application configuration management"""

import json
import sys
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field
from loguru import logger


class AppConfig(BaseModel):
    """Application configuration"""

    # Conversation API
    api_base_url: str = "http://localhost:8080"
    api_token: Optional[str] = None  # sent as a bearer token when set
    api_timeout_seconds: Optional[float] = 30.0  # None = wait indefinitely

    # Logging
    log_level: str = "INFO"

    # Playback settings
    playback_volume: float = Field(default=0.8, ge=0.0, le=1.0)
    autoplay_on_select: bool = False  # start playback as soon as audio loads
    seek_step_seconds: float = Field(default=5.0, gt=0.0)  # skip back/forward step

    # Transcript settings
    auto_scroll_transcript: bool = True  # keep the active sentence in view
    highlight_active_word: bool = True

    # UI settings
    last_conversation_id: Optional[str] = None
    last_window_geometry: Optional[str] = None


def get_config_dir() -> Path:
    """Get the application config directory"""
    if sys.platform == "win32":
        config_dir = Path.home() / "AppData" / "Local" / "ConvoReview"
    elif sys.platform == "darwin":
        config_dir = Path.home() / "Library" / "Application Support" / "ConvoReview"
    else:
        config_dir = Path.home() / ".config" / "ConvoReview"

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Get the config file path"""
    return get_config_dir() / "config.json"


class ConfigManager:
    """Singleton config manager"""

    _instance: Optional["ConfigManager"] = None
    _config: Optional[AppConfig] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._config is None:
            self._config = self._load_config()

    def _load_config(self) -> AppConfig:
        """Load config from file or create default"""
        config_path = get_config_path()

        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                logger.info(f"Loaded config from {config_path}")
                return AppConfig(**data)
            except Exception as e:
                logger.warning(f"Failed to load config: {e}, using defaults")
                return AppConfig()
        else:
            logger.info("No config file found, using defaults")
            return AppConfig()

    def save(self):
        """Save config to file"""
        config_path = get_config_path()

        try:
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump(self._config.model_dump(), f, indent=2)
            logger.info(f"Saved config to {config_path}")
        except Exception as e:
            logger.error(f"Failed to save config: {e}")

    @property
    def config(self) -> AppConfig:
        """Get the current config"""
        return self._config

    def set_last_conversation(self, conversation_id: Optional[str]):
        """Remember the last opened conversation"""
        if self._config.last_conversation_id == conversation_id:
            return
        self._config.last_conversation_id = conversation_id
        self.save()

    def set_window_geometry(self, geometry: str):
        """Remember the main window geometry (base64 of QWidget.saveGeometry)"""
        self._config.last_window_geometry = geometry
        self.save()


def get_config_manager() -> ConfigManager:
    """Get the singleton config manager"""
    return ConfigManager()
