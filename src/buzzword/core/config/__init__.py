"""Service configuration.

Values come from the environment (optionally seeded from a ``.env`` file);
CLI flags override the list-file paths. Nested models group the knobs that
tests commonly shrink (timer periods, ranking thresholds).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .base import get_bool_env, get_env, get_list_env, load_env_file
from .lists import IgnoreSet, load_ignores

DEFAULT_PUBLISH_RELAYS = [
    "wss://relay-jp.nostr.wirednet.jp",
    "wss://yabu.me",
    "wss://relay.nostr.band",
    "wss://nos.lol",
]

DEFAULT_SUBSCRIBE_RELAYS = [
    "wss://yabu.me",
    "wss://relay-jp.nostr.wirednet.jp",
]

DEFAULT_UPLOAD_URL = "https://nostr.build/api/v2/upload/files"

TRIGGER_PHRASE = "バズワードランキング"


class TimingConfig(BaseModel):
    """Timer periods and windows, in seconds."""

    model_config = ConfigDict(extra="ignore")

    summary_interval: float = 3600.0
    sweep_interval: float = 600.0
    retention: float = 3600.0
    health_interval: float = 10.0
    health_max_retries: int = 60
    heartbeat_interval: float = 300.0
    reconnect_backoff: float = 5.0
    trigger_window: float = 10.0
    publish_timeout: float = 10.0


class RankingConfig(BaseModel):
    """Frequency store bound and ranking thresholds."""

    model_config = ConfigDict(extra="ignore")

    capacity: int = Field(default=1000, ge=1)
    min_count: int = Field(default=3, ge=1)
    min_items: int = Field(default=10, ge=0)
    top_n: int = Field(default=10, ge=1)


class Config(BaseModel):
    """Top-level settings for the buzzword service."""

    model_config = ConfigDict(extra="ignore")

    nsec: str = ""
    publish_relays: list[str] = Field(default_factory=lambda: list(DEFAULT_PUBLISH_RELAYS))
    subscribe_relays: list[str] = Field(default_factory=lambda: list(DEFAULT_SUBSCRIBE_RELAYS))
    heartbeat_url: str = ""
    font_file: str = "Koruri-Regular.ttf"
    upload_url: str = DEFAULT_UPLOAD_URL
    ignores_path: str = "ignores.txt"
    userdic_path: str = "userdic.dic"
    log_level: str = "INFO"

    # Skip posts that contain whitespace but no Japanese characters at all
    script_gate: bool = True
    trigger_phrase: str = TRIGGER_PHRASE
    queue_size: int = Field(default=10, ge=1)

    timing: TimingConfig = Field(default_factory=TimingConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)

    @classmethod
    def load(cls, env_file: str | None = None, **overrides: Any) -> "Config":
        """Build config from ``.env`` + environment, then apply overrides.

        ``None`` overrides are ignored so CLI flags can be passed through as-is.
        """
        load_env_file(env_file)
        values: dict[str, Any] = {
            "nsec": get_env("BOT_NSEC"),
            "publish_relays": get_list_env("BUZZWORD_RELAYS", DEFAULT_PUBLISH_RELAYS),
            "subscribe_relays": get_list_env(
                "BUZZWORD_SUBSCRIBE_RELAYS", DEFAULT_SUBSCRIBE_RELAYS
            ),
            "heartbeat_url": get_env("HEARTBEAT_URL"),
            "font_file": get_env("FONTFILE", "Koruri-Regular.ttf"),
            "upload_url": get_env("BUZZWORD_UPLOAD_URL", DEFAULT_UPLOAD_URL),
            "ignores_path": get_env("IGNORES", "ignores.txt"),
            "userdic_path": get_env("USERDIC", "userdic.dic"),
            "log_level": get_env("BUZZWORD_LOG_LEVEL", "INFO"),
            "script_gate": get_bool_env("BUZZWORD_SCRIPT_GATE", True),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


__all__ = [
    "Config",
    "TimingConfig",
    "RankingConfig",
    "IgnoreSet",
    "load_ignores",
    "get_env",
    "get_bool_env",
    "get_list_env",
    "load_env_file",
    "DEFAULT_PUBLISH_RELAYS",
    "DEFAULT_SUBSCRIBE_RELAYS",
    "TRIGGER_PHRASE",
]
