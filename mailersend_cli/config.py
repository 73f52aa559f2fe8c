"""Configuration management for the MailerSend CLI.

This module provides the multi-profile credential store: loading and saving
``config.yaml`` under the user's config directory, picking the active
profile, resolving the API token for a command invocation, and refreshing
OAuth access tokens that are about to expire.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import requests
import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from requests.exceptions import RequestException

from .exceptions import ConfigError, NoTokenError, ProfileNotFoundError, TokenRefreshError

PRODUCT = "mailersend"
CONFIG_FILENAME = "config.yaml"
TOKEN_ENV_VAR = "MAILERSEND_API_TOKEN"

OAUTH_CLIENT_ID = "1007"
OAUTH_TOKEN_URL = "https://app.mailersend.com/oauth/token"
OAUTH_REFRESH_TIMEOUT = 30

# Refresh OAuth tokens this long before they expire.
REFRESH_MARGIN = timedelta(minutes=5)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format an instant as RFC 3339 in UTC."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Profile(BaseModel):
    """A named credential bundle."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_token: Optional[str] = Field(None, description="Service-issued API token")
    oauth_access_token: Optional[str] = Field(
        None,
        description="OAuth access token",
        validation_alias=AliasChoices("oauth_access_token", "oauth_token"),
    )
    oauth_refresh_token: Optional[str] = Field(None, description="OAuth refresh token")
    oauth_expires_at: Optional[str] = Field(None, description="OAuth expiry (RFC 3339)")

    @field_validator("oauth_expires_at", mode="before")
    @classmethod
    def coerce_expires_at(cls, v: Any) -> Optional[str]:
        """Accept timestamps YAML already parsed into datetimes."""
        if isinstance(v, datetime):
            if v.tzinfo is None:
                v = v.replace(tzinfo=timezone.utc)
            return format_timestamp(v)
        return v

    @property
    def expires_at(self) -> Optional[datetime]:
        if not self.oauth_expires_at:
            return None
        return parse_timestamp(self.oauth_expires_at)

    @property
    def method(self) -> str:
        """Authentication method this profile uses."""
        if self.api_token:
            return "token"
        if self.oauth_access_token:
            return "oauth"
        return "none"

    def masked_token(self) -> str:
        if not self.api_token:
            return "none"
        token = self.api_token
        if len(token) > 10:
            return f"{token[:7]}...{token[-4:]}"
        return "***"


class Config(BaseModel):
    """The configuration document: profiles plus the active profile name."""

    model_config = ConfigDict(extra="allow")

    active_profile: str = ""
    profiles: Dict[str, Profile] = Field(default_factory=dict)

    @field_validator("active_profile", mode="before")
    @classmethod
    def coerce_active_profile(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("profiles", mode="before")
    @classmethod
    def coerce_profiles(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(name): profile or {} for name, profile in v.items()}
        return v

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def default_config_dir() -> Path:
    """Return ``$XDG_CONFIG_HOME/mailersend`` or ``~/.config/mailersend``."""
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / PRODUCT
    return Path.home() / ".config" / PRODUCT


def active_profile(cfg: Config) -> Tuple[str, Profile]:
    """Resolve the active profile of a configuration.

    When no active profile is recorded, the alphabetically first profile is
    used so the choice is stable.

    Raises:
        ConfigError: If no profiles are configured
        ProfileNotFoundError: If the active profile name is not configured
    """
    name = cfg.active_profile
    if not name:
        if not cfg.profiles:
            raise ConfigError(
                "no profiles configured - run 'mailersend auth login' "
                "or 'mailersend profile add <name>'"
            )
        name = sorted(cfg.profiles)[0]

    if name not in cfg.profiles:
        raise ProfileNotFoundError(name)
    return name, cfg.profiles[name]


def refresh_oauth_token(refresh_token: str) -> Profile:
    """Exchange a refresh token for a new access token.

    Args:
        refresh_token: The stored OAuth refresh token

    Returns:
        Profile holding only the new OAuth fields

    Raises:
        TokenRefreshError: If the exchange fails for any reason
    """
    data = {
        "grant_type": "refresh_token",
        "client_id": OAUTH_CLIENT_ID,
        "refresh_token": refresh_token,
    }

    try:
        response = requests.post(OAUTH_TOKEN_URL, data=data, timeout=OAUTH_REFRESH_TIMEOUT)
    except RequestException as e:
        raise TokenRefreshError(f"refresh request failed: {e}")

    if response.status_code != 200:
        raise TokenRefreshError(f"refresh failed (HTTP {response.status_code})")

    try:
        payload = response.json()
    except ValueError as e:
        raise TokenRefreshError(f"failed to parse refresh response: {e}")

    access_token = payload.get("access_token") if isinstance(payload, dict) else None
    if not access_token:
        raise TokenRefreshError("server returned empty access token on refresh")

    try:
        expires_in = int(payload.get("expires_in") or 0)
    except (TypeError, ValueError) as e:
        raise TokenRefreshError(f"failed to parse refresh response: {e}")

    return Profile(
        oauth_access_token=access_token,
        oauth_refresh_token=payload.get("refresh_token") or None,
        oauth_expires_at=format_timestamp(_now() + timedelta(seconds=expires_in)),
    )


class ConfigManager:
    """Loads, saves and edits the profile configuration file."""

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """Initialize configuration manager.

        Args:
            config_dir: Configuration directory path. If None, the XDG
                location is resolved each time it is needed.
        """
        self._config_dir = config_dir

    @property
    def config_dir(self) -> Path:
        return self._config_dir or default_config_dir()

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def load(self) -> Config:
        """Load the configuration; a missing file yields an empty one.

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        path = self.config_file
        if not path.exists():
            return Config()

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"failed to read config: {e}")

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"failed to parse config: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("failed to parse config: top level must be a mapping")

        try:
            return Config.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"failed to parse config: {e}")

    def save(self, cfg: Config) -> None:
        """Atomically write the configuration with owner-only permissions.

        Raises:
            ConfigError: If the directory or file cannot be written
        """
        directory = self.config_dir
        try:
            directory.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"failed to create config directory: {e}")

        content = yaml.safe_dump(cfg.to_document(), default_flow_style=False, sort_keys=False)

        # mkstemp creates the file with mode 0600
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".config-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.config_file)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ConfigError(f"failed to save config: {e}")

    def get_token(self, profile_override: Optional[str] = None) -> str:
        """Resolve the API token for this invocation.

        Resolution order: ``MAILERSEND_API_TOKEN``, then the profile named by
        ``profile_override``, then the active profile. Within a profile an
        API token wins over OAuth; OAuth access tokens close to expiry are
        refreshed and persisted first.

        Raises:
            ConfigError: If no usable credential is configured
            TokenRefreshError: If an expired OAuth token cannot be refreshed
        """
        env_token = os.getenv(TOKEN_ENV_VAR)
        if env_token:
            return env_token

        cfg = self.load()
        if profile_override:
            if profile_override not in cfg.profiles:
                raise ProfileNotFoundError(profile_override)
            name, profile = profile_override, cfg.profiles[profile_override]
        else:
            name, profile = active_profile(cfg)

        if profile.api_token:
            return profile.api_token
        if profile.oauth_access_token:
            return self._oauth_access_token(cfg, name, profile)

        raise NoTokenError(
            f"no token found - run 'mailersend auth login' or set {TOKEN_ENV_VAR}"
        )

    def _oauth_access_token(self, cfg: Config, name: str, profile: Profile) -> str:
        expires_at = profile.expires_at
        if expires_at is None or not profile.oauth_refresh_token:
            return profile.oauth_access_token

        now = _now()
        if now < expires_at - REFRESH_MARGIN:
            return profile.oauth_access_token

        try:
            refreshed = refresh_oauth_token(profile.oauth_refresh_token)
        except TokenRefreshError as e:
            if now < expires_at:
                return profile.oauth_access_token
            raise TokenRefreshError(f"OAuth token expired and refresh failed: {e.message}")

        cfg.profiles[name] = profile.model_copy(
            update={
                "oauth_access_token": refreshed.oauth_access_token,
                "oauth_refresh_token": refreshed.oauth_refresh_token,
                "oauth_expires_at": refreshed.oauth_expires_at,
            }
        )
        self.save(cfg)
        return refreshed.oauth_access_token

    def active(self) -> Tuple[str, Profile]:
        """Return the active profile's name and contents."""
        return active_profile(self.load())

    def get_profile(self, name: str) -> Profile:
        cfg = self.load()
        if name not in cfg.profiles:
            raise ProfileNotFoundError(name)
        return cfg.profiles[name]

    def list_profiles(self) -> List[Dict[str, Any]]:
        """List profiles sorted by name, with the active one flagged."""
        cfg = self.load()
        return [
            {
                "name": name,
                "active": name == cfg.active_profile,
                "method": cfg.profiles[name].method,
                "has_token": bool(cfg.profiles[name].api_token),
                "has_oauth": bool(cfg.profiles[name].oauth_access_token),
            }
            for name in sorted(cfg.profiles)
        ]

    def has_profile(self, name: str) -> bool:
        return name in self.load().profiles

    def add_profile(self, name: str, api_token: str) -> None:
        """Create or replace a token profile; it becomes active if none is."""
        if not api_token:
            raise ConfigError("token cannot be empty")

        cfg = self.load()
        cfg.profiles[name] = Profile(api_token=api_token)
        if not cfg.active_profile:
            cfg.active_profile = name
        self.save(cfg)

    def login(self, name: str, api_token: str) -> None:
        """Store a token profile and make it the active profile."""
        if not api_token:
            raise ConfigError("token cannot be empty")

        cfg = self.load()
        cfg.profiles[name] = Profile(api_token=api_token)
        cfg.active_profile = name
        self.save(cfg)

    def switch_profile(self, name: str) -> None:
        cfg = self.load()
        if name not in cfg.profiles:
            raise ProfileNotFoundError(name)
        cfg.active_profile = name
        self.save(cfg)

    def remove_profile(self, name: str) -> None:
        """Delete a profile, picking a new active profile if needed."""
        cfg = self.load()
        if name not in cfg.profiles:
            raise ProfileNotFoundError(name)

        del cfg.profiles[name]
        if cfg.active_profile == name:
            cfg.active_profile = sorted(cfg.profiles)[0] if cfg.profiles else ""
        self.save(cfg)

    def logout(self, name: Optional[str] = None) -> str:
        """Remove the named (or active) profile and return its name."""
        if not name:
            name = self.load().active_profile or "default"
        self.remove_profile(name)
        return name
