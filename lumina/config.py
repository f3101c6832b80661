"""
Lumina Configuration
====================
Two layers:

1. Runtime settings (`settings`), pydantic-settings, overridable with
   `LUMINA_*` environment variables.
2. Persisted launcher configuration (`LauncherConfig`), a JSON document in
   the per-user config directory, edited from the settings overlay.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from lumina.exceptions import ConfigurationError
from lumina.utils.path_manager import PathManager

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

# -----------------------------------------------------------------------------
# Runtime settings
# -----------------------------------------------------------------------------

class Settings(BaseSettings):
    """Process-level knobs with sensible defaults."""

    model_config = SettingsConfigDict(env_prefix="LUMINA_", case_sensitive=False, extra="ignore")

    # Search
    result_limit: int = 10
    search_timeout: float = 3.0          # seconds for one resolution pass

    # AI transport
    ai_connect_timeout: float = 10.0
    ai_read_timeout: float = 60.0

    # Window
    focus_hide_delay: float = 0.150      # grace period before hiding on focus loss
    focus_settle_delay: float = 0.050    # pause between show() and focus()
    window_width: int = 700
    window_height: int = 600
    compact_window_height: int = 110     # only the search bar is visible

    # Misc
    log_level: str = "INFO"
    config_dir: Optional[str] = None


# Singleton settings instance
settings = Settings()


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging the same way for every entry point."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )


# -----------------------------------------------------------------------------
# Persisted launcher configuration
# -----------------------------------------------------------------------------

AI_SERVICES: Dict[str, str] = {
    "openrouter": "https://openrouter.ai/api/v1/chat/completions",
    "openai": "https://api.openai.com/v1/chat/completions",
}


def _default_search_directories() -> List[str]:
    return [str(Path.home()), "/usr/share/applications"]


class LauncherConfig(BaseModel):
    """User-editable configuration stored as `config.json`."""
    ai_service: str = "openrouter"
    openrouter_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    default_model: str = "anthropic/claude-3.5-sonnet"
    search_directories: List[str] = Field(default_factory=_default_search_directories)

    def api_key_for(self, service: str) -> Optional[str]:
        keys = {
            "openrouter": self.openrouter_api_key,
            "openai": self.openai_api_key,
        }
        return keys.get(service)


@dataclass(frozen=True)
class ServiceEndpoint:
    """A fully resolved completion target."""
    name: str
    url: str
    api_key: str
    model: str

    def __repr__(self) -> str:
        return f"<ServiceEndpoint name={self.name!r} model={self.model!r} key={self.api_key[:8]}...>"


def resolve_service(config: LauncherConfig) -> ServiceEndpoint:
    """
    Pick the endpoint, key and model for the configured AI service.

    Raises:
        ConfigurationError: unsupported service, or no key for it
    """
    url = AI_SERVICES.get(config.ai_service)
    if url is None:
        raise ConfigurationError(f"Unsupported AI service: {config.ai_service!r}")

    api_key = (config.api_key_for(config.ai_service) or "").strip()
    if not api_key:
        raise ConfigurationError(f"API key not configured for {config.ai_service}")

    return ServiceEndpoint(
        name=config.ai_service,
        url=url,
        api_key=api_key,
        model=config.default_model,
    )


def _path_manager() -> PathManager:
    return PathManager(config_dir=settings.config_dir)


def load_config(path: Optional[Path] = None) -> LauncherConfig:
    """
    Read the launcher configuration.

    A missing file yields defaults. An unreadable or invalid file is logged
    and also yields defaults, so a broken config never blocks the launcher.
    """
    config_path = path or _path_manager().get_config_file()

    if not config_path.exists():
        return LauncherConfig()

    try:
        return LauncherConfig.model_validate_json(config_path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        logger.warning(f"⚠️ Could not read config {config_path}: {e}")
        return LauncherConfig()


def save_config(config: LauncherConfig, path: Optional[Path] = None) -> Path:
    """Write the launcher configuration as pretty-printed JSON."""
    if path is None:
        manager = _path_manager()
        manager.ensure_config_dir()
        path = manager.get_config_file()
    else:
        path.parent.mkdir(parents=True, exist_ok=True)

    path.write_text(json.dumps(config.model_dump(), indent=2), encoding="utf-8")
    logger.info(f"✅ Config saved to {path}")
    return path
