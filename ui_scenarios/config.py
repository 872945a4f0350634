"""Environment-driven configuration for scenario runs."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

DEFAULT_BASE_URL = "http://localhost:3000"

# Categories of UI feedback.  Records name a category instead of literal copy.
DEFAULT_PATTERNS: Mapping[str, str] = MappingProxyType(
    {
        "success": r"success|created|saved|updated|deleted|added|registered|welcome",
        "field_error": r"required|invalid|must|already|too (short|long)|not match",
        "form_error": r"error|failed|unable|could not|already exists",
        "access_denied": r"denied|invalid (username|email|credentials)|incorrect|not (found|authorized)|locked",
    }
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return raw.lower() in _TRUE_VALUES


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else default


def get_directory_from_env(env_name: str, default_path: str) -> Path:
    """Return a directory path from env, ensuring it exists."""
    configured = os.environ.get(env_name, "").strip() or default_path
    directory = Path(configured)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_admin_credentials() -> tuple[str, str]:
    """Return admin (username, password), checking ADMIN_* then UI_ADMIN_* vars."""
    username = (os.environ.get("ADMIN_USERNAME") or os.environ.get("UI_ADMIN_USER") or "admin").strip()
    password = (os.environ.get("ADMIN_PASSWORD") or os.environ.get("UI_ADMIN_PASSWORD") or "").strip()
    return username, password


@dataclass(frozen=True)
class MessagePatterns:
    """Regular expressions for categories of UI feedback."""

    patterns: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_PATTERNS))

    def __post_init__(self) -> None:
        object.__setattr__(self, "patterns", MappingProxyType(dict(self.patterns)))

    def resolve(self, key_or_pattern: str) -> str:
        """Category name -> configured regex; anything else is used verbatim."""
        return self.patterns.get(key_or_pattern, key_or_pattern)

    def matches(self, key_or_pattern: str, text: str | None) -> bool:
        if text is None:
            return False
        return re.search(self.resolve(key_or_pattern), text, re.IGNORECASE) is not None

    @classmethod
    def from_env(cls) -> MessagePatterns:
        merged = dict(DEFAULT_PATTERNS)
        for key in DEFAULT_PATTERNS:
            override = os.environ.get(f"UI_PATTERN_{key.upper()}", "").strip()
            if override:
                merged[key] = override
        return cls(merged)


@dataclass(frozen=True)
class UiConfig:
    """Opaque external configuration: target app, mailbox, and time budgets."""

    base_url: str = DEFAULT_BASE_URL
    admin_username: str = "admin"
    admin_password: str = ""
    mailpit_url: str = ""
    mailpit_username: str = ""
    mailpit_password: str = ""
    headless: bool = True
    action_timeout_ms: float = 5_000
    feedback_timeout: float = 5.0
    poll_interval: float = 0.25
    mail_timeout: float = 60.0
    mail_poll_interval: float = 2.0
    artifacts_dir: Path | None = None
    unique_addresses: bool = True
    log_level: str = "INFO"
    patterns: MessagePatterns = field(default_factory=MessagePatterns)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def mailbox_enabled(self) -> bool:
        return bool(self.mailpit_url)

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @classmethod
    def from_env(cls) -> UiConfig:
        username, password = get_admin_credentials()
        artifacts = os.environ.get("UI_ARTIFACTS_DIR", "").strip()
        return cls(
            base_url=os.environ.get("ADMIN_BASE_URL", "").strip() or DEFAULT_BASE_URL,
            admin_username=username,
            admin_password=password,
            mailpit_url=os.environ.get("MAILPIT_URL", "").strip(),
            mailpit_username=os.environ.get("MAILPIT_USERNAME", "").strip(),
            mailpit_password=os.environ.get("MAILPIT_PASSWORD", "").strip(),
            headless=_env_bool("UI_HEADLESS", True),
            action_timeout_ms=_env_float("UI_ACTION_TIMEOUT_MS", 5_000),
            feedback_timeout=_env_float("UI_FEEDBACK_TIMEOUT", 5.0),
            poll_interval=_env_float("UI_POLL_INTERVAL", 0.25),
            mail_timeout=_env_float("MAIL_TIMEOUT", 60.0),
            mail_poll_interval=_env_float("MAIL_POLL_INTERVAL", 2.0),
            artifacts_dir=get_directory_from_env("UI_ARTIFACTS_DIR", artifacts) if artifacts else None,
            unique_addresses=_env_bool("UI_UNIQUE_ADDRESSES", True),
            log_level=os.environ.get("UI_LOG_LEVEL", "INFO").strip() or "INFO",
            patterns=MessagePatterns.from_env(),
        )
