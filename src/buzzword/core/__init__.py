"""Core framework primitives for buzzword: config, errors, models, logging."""

from __future__ import annotations

from buzzword.core.config import Config, RankingConfig, TimingConfig
from buzzword.core.exceptions import (
    BuzzwordError,
    ConfigLoadError,
    ConfigurationError,
    IngestionError,
    InsufficientDataError,
    PublishFailedError,
    RenderFailedError,
    SigningError,
    TransportError,
)
from buzzword.core.models import Observation, RankedItem

__all__ = [
    "Config",
    "RankingConfig",
    "TimingConfig",
    "BuzzwordError",
    "ConfigLoadError",
    "ConfigurationError",
    "IngestionError",
    "InsufficientDataError",
    "PublishFailedError",
    "RenderFailedError",
    "SigningError",
    "TransportError",
    "Observation",
    "RankedItem",
]
