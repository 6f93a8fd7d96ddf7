"""Application configuration."""
import os
from dataclasses import dataclass, field
from typing import List


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EditorApiConfig:
    """Record API configuration."""

    base_url: str = "https://67d944ca00348dd3e2aa65f4.mockapi.io/"
    api_key: str = ""  # Read from env or user input
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "EditorApiConfig":
        """Load config from environment variables."""
        return cls(
            base_url=os.getenv("RECORD_EDITOR_API_URL", "https://67d944ca00348dd3e2aa65f4.mockapi.io/"),
            api_key=os.getenv("RECORD_EDITOR_API_KEY", ""),
            timeout=int(os.getenv("RECORD_EDITOR_TIMEOUT", "30")),
        )


@dataclass
class EditorOptions:
    """Editor behaviour switches."""

    show_banner: bool = True
    warn_on_blur: bool = True

    @classmethod
    def from_env(cls) -> "EditorOptions":
        """Load options from environment variables."""
        return cls(
            show_banner=_env_flag("RECORD_EDITOR_SHOW_BANNER", True),
            warn_on_blur=_env_flag("RECORD_EDITOR_WARN_ON_BLUR", True),
        )


@dataclass
class AppConfig:
    """Application configuration."""

    endpoints: List[str] = field(
        default_factory=lambda: [
            "manage",
            "api-registration",
            "audit",
            "credentials",
            "faqs",
            "option-set",
            "option-types",
            "scope-type",
            "server-types",
            "servers",
            "variables",
            "settings",
        ]
    )
    api: EditorApiConfig = None
    options: EditorOptions = None

    def __post_init__(self):
        """Fill defaults."""
        if self.api is None:
            self.api = EditorApiConfig.from_env()
        if self.options is None:
            self.options = EditorOptions.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            api=EditorApiConfig.from_env(),
            options=EditorOptions.from_env(),
        )


# Global instance
app_config = AppConfig()
