from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .exceptions import ConfigError

DEFAULT_BASE_URL = 'http://waifu-haven.ddns.net:50006'
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = 'WaifuAPIClient/2.1.0'
BOT_USER_AGENT = 'DiscordBot (Auto-Config, 2.1.0)'
DEFAULT_PLATFORM = 'discord'

ENV_PREFIX = 'WAIFU_HAVEN_'


def load_env_file(env_path: Path) -> None:
    """Fill unset environment variables from a local ``.env`` file."""
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip(); v = v.strip().strip('"').strip("'")
        if not k:
            continue
        existing = os.environ.get(k)
        if existing is None or existing.strip() == '':
            os.environ[k] = v


def env(name: str, required: bool = True) -> Optional[str]:
    val = os.getenv(name)
    if required and (val is None or val.strip() == ''):
        raise ConfigError(f"Missing required environment variable: {name}")
    return val


@dataclass(frozen=True)
class BotMetadata:
    """Bot-platform details sent as ``X-Bot-*`` headers."""
    platform: str = DEFAULT_PLATFORM
    guild_id: Optional[str] = None
    user_id: Optional[str] = None
    version: Optional[str] = None

    def headers(self) -> Dict[str, str]:
        out = {'X-Bot-Platform': self.platform}
        if self.guild_id:
            out['X-Bot-Guild'] = str(self.guild_id)
        if self.user_id:
            out['X-Bot-User'] = str(self.user_id)
        if self.version:
            out['X-Bot-Version'] = str(self.version)
        return out


@dataclass(frozen=True)
class ClientConfig:
    """Credentials and network settings for one client instance.

    Every network parameter may be overridden; the defaults point at the
    public Waifu Haven deployment.
    """
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    bot: BotMetadata = field(default_factory=BotMetadata)
    requests_per_second: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ConfigError('API key is required')
        if not self.base_url:
            raise ConfigError('base_url cannot be empty')
        if self.timeout is None or self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout!r}")
        if self.requests_per_second is not None and self.requests_per_second <= 0:
            raise ConfigError(f"requests_per_second must be positive, got {self.requests_per_second!r}")

    @classmethod
    def from_env(cls) -> 'ClientConfig':
        api_key = env(ENV_PREFIX + 'API_KEY')
        timeout_raw = os.getenv(ENV_PREFIX + 'TIMEOUT')
        rps_raw = os.getenv(ENV_PREFIX + 'RPS')
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
            rps = float(rps_raw) if rps_raw else None
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e
        bot = BotMetadata(
            platform=os.getenv(ENV_PREFIX + 'BOT_PLATFORM') or DEFAULT_PLATFORM,
            guild_id=os.getenv(ENV_PREFIX + 'BOT_GUILD') or None,
            user_id=os.getenv(ENV_PREFIX + 'BOT_USER') or None,
            version=os.getenv(ENV_PREFIX + 'BOT_VERSION') or None,
        )
        return cls(
            api_key=api_key,  # type: ignore[arg-type]
            base_url=os.getenv(ENV_PREFIX + 'BASE_URL') or DEFAULT_BASE_URL,
            timeout=timeout,
            user_agent=os.getenv(ENV_PREFIX + 'USER_AGENT') or DEFAULT_USER_AGENT,
            bot=bot,
            requests_per_second=rps,
        )
