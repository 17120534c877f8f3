"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/config.py
Version:        1.0.0
Description:    Installation-wide settings on top of QSettings. Holds the
                handwriting provider choice and its API keys, parsing and
                device options, storage and logging configuration.
------------------------------------------------------------------------------
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from PyQt6.QtCore import QSettings, QStandardPaths

from inkplanner.exceptions import ConfigurationError
from inkplanner.models.types import DEFAULT_NOTES_FOLDER, MeridiemPolicy, OCRProvider


class AppConfig:
    """
    QSettings-backed configuration. Implements the SettingsProvider interface
    used by the pipeline (get_ocr_provider, get_ocr_api_key, get_notes_folder).
    """

    KEY_OCR_PROVIDER: str = "provider"
    KEY_OCR_TIMEOUT: str = "timeout"
    KEY_HOUR_POLICY: str = "ambiguous_hour_policy"
    KEY_NOTES_FOLDER: str = "notes_folder"
    KEY_DB_PATH: str = "db_path"
    KEY_LOG_LEVEL: str = "log_level"
    KEY_LOG_COMPONENTS: str = "log_components"

    # Settings key and environment fallback per server-side provider
    API_KEYS: Dict[OCRProvider, str] = {
        OCRProvider.OPENAI: "openai_api_key",
        OCRProvider.CLAUDE: "anthropic_api_key",
        OCRProvider.GEMINI: "gemini_api_key",
        OCRProvider.GOOGLE_VISION: "google_vision_api_key",
    }
    API_KEY_ENV: Dict[OCRProvider, str] = {
        OCRProvider.OPENAI: "OPENAI_API_KEY",
        OCRProvider.CLAUDE: "ANTHROPIC_API_KEY",
        OCRProvider.GEMINI: "GEMINI_API_KEY",
        OCRProvider.GOOGLE_VISION: "GOOGLE_VISION_API_KEY",
    }

    DEFAULT_MODELS: Dict[OCRProvider, str] = {
        OCRProvider.OPENAI: "gpt-4o",
        OCRProvider.CLAUDE: "claude-sonnet-4-20250514",
        OCRProvider.GEMINI: "gemini-2.0-flash",
    }
    DEFAULT_OCR_TIMEOUT: int = 120

    APP_ID: str = "inkplanner"
    _active_profile: Optional[str] = None

    def __init__(self, profile: Optional[str] = None, settings: Optional[QSettings] = None) -> None:
        """
        Args:
            profile: Optional profile name (e.g. 'dev', 'test'). Settings and
                     data paths are isolated per profile (inkplanner-dev).
            settings: Explicit QSettings instance, mainly for tests.
        """
        if profile is None:
            profile = AppConfig._active_profile
        else:
            AppConfig._active_profile = profile

        self.profile = profile
        self.active_id = self.APP_ID
        if profile:
            self.active_id = f"{self.APP_ID}-{profile}"

        self.settings = settings if settings is not None else QSettings(self.active_id, self.active_id)

    def get_data_dir(self) -> Path:
        """
        Returns the data directory: ~/.local/share/inkplanner[-profile]/
        """
        base_path = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.GenericDataLocation)
        data_dir = Path(base_path) / self.active_id
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def _get_setting(self, group: str, key: str, default: Any = None) -> Any:
        if group:
            self.settings.beginGroup(group)
        val = self.settings.value(key, default)
        if group:
            self.settings.endGroup()
        return val

    def _set_setting(self, group: str, key: str, value: Any) -> None:
        if isinstance(value, str):
            value = value.strip()

        if group:
            self.settings.beginGroup(group)
        self.settings.setValue(key, value)
        if group:
            self.settings.endGroup()

    # --- Handwriting recognition ---

    def get_ocr_provider(self) -> OCRProvider:
        """
        Retrieves the active handwriting provider.

        Raises:
            ConfigurationError: If the stored tag names no known provider.
        """
        raw = str(self._get_setting("Handwriting", self.KEY_OCR_PROVIDER, OCRProvider.TESSERACT.value))
        try:
            return OCRProvider(raw.strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown OCR provider: {raw}")

    def set_ocr_provider(self, provider: OCRProvider) -> None:
        self._set_setting("Handwriting", self.KEY_OCR_PROVIDER, OCRProvider(provider).value)

    def get_ocr_api_key(self, provider: OCRProvider) -> str:
        """
        Retrieves the API key of a provider, falling back to its environment
        variable. Tesseract has no key and yields an empty string.
        """
        provider = OCRProvider(provider)
        key_name = self.API_KEYS.get(provider)
        if not key_name:
            return ""

        val = self._get_setting("Handwriting", key_name)
        if val is None or str(val).strip() == "":
            return os.environ.get(self.API_KEY_ENV[provider], "")
        return str(val)

    def set_ocr_api_key(self, provider: OCRProvider, key: str) -> None:
        """
        Saves the API key of a server-side provider.

        Raises:
            ConfigurationError: For providers that take no key.
        """
        provider = OCRProvider(provider)
        key_name = self.API_KEYS.get(provider)
        if not key_name:
            raise ConfigurationError(f"Provider {provider.value} does not use an API key")
        self._set_setting("Handwriting", key_name, key)

    def get_ocr_model(self, provider: OCRProvider) -> str:
        """Model name for a generative provider ('' for providers without one)."""
        provider = OCRProvider(provider)
        default = self.DEFAULT_MODELS.get(provider)
        if default is None:
            return ""
        return str(self._get_setting("Handwriting", f"{provider.value}_model", default))

    def set_ocr_model(self, provider: OCRProvider, model: str) -> None:
        provider = OCRProvider(provider)
        self._set_setting("Handwriting", f"{provider.value}_model", model)

    def get_ocr_timeout(self) -> int:
        """HTTP timeout in seconds for a single recognition call."""
        try:
            return int(self._get_setting("Handwriting", self.KEY_OCR_TIMEOUT, self.DEFAULT_OCR_TIMEOUT))
        except (TypeError, ValueError):
            return self.DEFAULT_OCR_TIMEOUT

    def set_ocr_timeout(self, seconds: int) -> None:
        self._set_setting("Handwriting", self.KEY_OCR_TIMEOUT, int(seconds))

    # --- Parsing ---

    def get_ambiguous_hour_policy(self) -> MeridiemPolicy:
        """
        How hours written without am/pm are read. Falls back to the
        afternoon bias on unknown values.
        """
        raw = str(self._get_setting("Parsing", self.KEY_HOUR_POLICY, MeridiemPolicy.AFTERNOON_BIAS.value))
        try:
            return MeridiemPolicy(raw.strip().lower())
        except ValueError:
            return MeridiemPolicy.AFTERNOON_BIAS

    def set_ambiguous_hour_policy(self, policy: MeridiemPolicy) -> None:
        self._set_setting("Parsing", self.KEY_HOUR_POLICY, MeridiemPolicy(policy).value)

    # --- Device ---

    def get_notes_folder(self) -> str:
        """Remote folder whose notes are indexed and processed."""
        val = str(self._get_setting("Device", self.KEY_NOTES_FOLDER, DEFAULT_NOTES_FOLDER))
        return val if val else DEFAULT_NOTES_FOLDER

    def set_notes_folder(self, path: str) -> None:
        self._set_setting("Device", self.KEY_NOTES_FOLDER, path)

    # --- Storage ---

    def get_db_path(self) -> str:
        """SQLite database file, defaults to <data dir>/inkplanner.db."""
        val = str(self._get_setting("Storage", self.KEY_DB_PATH, ""))
        if val:
            return val
        return str(self.get_data_dir() / "inkplanner.db")

    def set_db_path(self, path: str) -> None:
        self._set_setting("Storage", self.KEY_DB_PATH, path)

    # --- Logging ---

    def get_log_level(self) -> str:
        return str(self._get_setting("Logging", self.KEY_LOG_LEVEL, "WARNING"))

    def set_log_level(self, level: str) -> None:
        self._set_setting("Logging", self.KEY_LOG_LEVEL, level.upper())

    def get_log_components(self) -> dict:
        """Retrieves a dictionary of component-specific log levels."""
        raw = str(self._get_setting("Logging", self.KEY_LOG_COMPONENTS, "{}"))
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return data if isinstance(data, dict) else {}

    def set_log_components(self, components: dict) -> None:
        self._set_setting("Logging", self.KEY_LOG_COMPONENTS, json.dumps(components))

    def get_log_file_path(self) -> Path:
        return self.get_data_dir() / "inkplanner.log"
