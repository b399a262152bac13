"""
Centralized settings and path configuration for the calculation service.

Defaults can be overridden with TRADENAV_* environment variables, which
are validated with pydantic before use.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


ENV_PREFIX = "TRADENAV_"


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file (src/trade_navigator/config/settings.py)
    return Path(__file__).resolve().parent.parent.parent.parent


class ConfigurationError(RuntimeError):
    """A TRADENAV_* environment variable holds an unusable value."""


class EnvironmentOverrides(BaseModel):
    """TRADENAV_* variables with the prefix stripped and names lowercased."""

    model_config = ConfigDict(extra="ignore")

    data_dir: Optional[Path] = None
    history_csv: Optional[Path] = None
    calculations_csv: Optional[Path] = None
    default_target_margin: float = Field(default=20.0, ge=0, le=100)
    default_price_band: float = Field(default=0.30, ge=0, lt=1)
    default_price_step: float = Field(default=1.0, gt=0)
    max_price_points: int = Field(default=5000, gt=0)
    marketing_response: float = 0.1
    cache_ttl_hours: float = Field(default=24.0, ge=0)
    cache_max_entries: int = Field(default=256, gt=0)
    log_level: str = "INFO"
    api_tokens: Optional[str] = None
    allowed_origins: str = "*"


def read_environment(environ: Optional[Mapping[str, str]] = None) -> EnvironmentOverrides:
    """
    Validate the TRADENAV_* variables of the environment.

    Blank values count as unset.

    Raises:
        ConfigurationError: a variable cannot be parsed or is out of range
    """
    environ = os.environ if environ is None else environ
    values = {
        name[len(ENV_PREFIX):].lower(): value.strip()
        for name, value in environ.items()
        if name.startswith(ENV_PREFIX) and value.strip()
    }
    try:
        return EnvironmentOverrides.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid environment configuration: {exc}") from exc


def parse_api_tokens(raw: Optional[str]) -> dict[str, str]:
    """Parse 'token:user,token2:user2' into a token → user id map."""
    tokens = {}
    if not raw:
        return tokens
    for pair in raw.split(','):
        pair = pair.strip()
        if not pair or ':' not in pair:
            continue
        token, user_id = pair.split(':', 1)
        if token.strip() and user_id.strip():
            tokens[token.strip()] = user_id.strip()
    return tokens


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Side-channel files
    history_csv: Path
    calculations_csv: Path

    # Optimizer defaults
    default_target_margin: float = 20.0
    default_price_band: float = 0.30  # ±30% around current price
    default_price_step: float = 1.0
    max_price_points: int = 5000
    marketing_response: float = 0.1  # volume gain per unit of marketing spend change

    # Result cache
    cache_ttl_hours: float = 24.0
    cache_max_entries: int = 256

    # Service
    log_level: str = "INFO"
    api_tokens: dict[str, str] = field(default_factory=dict)
    allowed_origins: tuple = ('*',)

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        env = read_environment()
        data_dir = env.data_dir or root / 'data'

        return cls(
            project_root=root,
            data_dir=data_dir,
            history_csv=env.history_csv or data_dir / 'optimization_history.csv',
            calculations_csv=env.calculations_csv or data_dir / 'saved_calculations.csv',
            default_target_margin=env.default_target_margin,
            default_price_band=env.default_price_band,
            default_price_step=env.default_price_step,
            max_price_points=env.max_price_points,
            marketing_response=env.marketing_response,
            cache_ttl_hours=env.cache_ttl_hours,
            cache_max_entries=env.cache_max_entries,
            log_level=env.log_level,
            api_tokens=parse_api_tokens(env.api_tokens),
            allowed_origins=tuple(o.strip() for o in env.allowed_origins.split(',') if o.strip()),
        )

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_hours * 3600


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
