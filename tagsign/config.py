# tagsign/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_DOCUSEAL_URL = "https://api.docuseal.com"
OCR_MODES = ("auto", "force", "off")


class ConfigError(ValueError):
    pass


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is not None:
        value = value.strip()
        if value == "":
            return default
        return value
    return default


def _get_int(key: str, default: int) -> int:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {key} must be an integer") from exc


def _get_float(key: str, default: float) -> float:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {key} must be a number") from exc


def _get_choice(key: str, default: str, choices: tuple[str, ...]) -> str:
    value = (_get_env(key, default) or default).lower()
    if value not in choices:
        raise ConfigError(f"Environment variable {key} must be one of {', '.join(choices)}")
    return value


@dataclass(slots=True)
class AppConfig:
    docuseal_api_key: Optional[str]
    docuseal_api_url: str
    http_timeout: float
    max_upload_mb: int
    ocr_mode: str
    ocr_lang: str
    max_pages: Optional[int]
    log_level: str

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def load_config() -> AppConfig:
    max_pages = _get_int("MAX_PAGES", 0)
    return AppConfig(
        docuseal_api_key=_get_env("DOCUSEAL_API_KEY"),
        docuseal_api_url=_get_env("DOCUSEAL_API_URL", DEFAULT_DOCUSEAL_URL).rstrip("/"),
        http_timeout=_get_float("HTTP_TIMEOUT_SECONDS", 30.0),
        max_upload_mb=max(1, _get_int("MAX_UPLOAD_MB", 10)),
        ocr_mode=_get_choice("OCR_MODE", "auto", OCR_MODES),
        ocr_lang=_get_env("OCR_LANG", "eng"),
        max_pages=max_pages if max_pages > 0 else None,
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
    )
