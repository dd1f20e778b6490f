"""Exception hierarchy for buzzword (transport-neutral)."""

from __future__ import annotations

from typing import Any


class BuzzwordError(Exception):
    """Base exception for buzzword."""

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(BuzzwordError):
    """Invalid or missing configuration. Fatal at startup."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Invalid configuration"


class ConfigLoadError(BuzzwordError):
    """An optional list file could not be read; callers fall back to defaults."""

    code: str = "CONFIG_LOAD_ERROR"
    message: str = "Failed to load configuration file"


class IngestionError(BuzzwordError):
    """A post could not be turned into phrases (tokenizer failure, bad payload)."""

    code: str = "INGESTION_ERROR"
    message: str = "Failed to ingest post"


class InsufficientDataError(BuzzwordError):
    """Too few ranked groups to produce a meaningful summary."""

    code: str = "INSUFFICIENT_DATA"
    message: str = "Not enough distinct phrases to rank"


class PublishFailedError(BuzzwordError):
    """No relay accepted the outbound summary."""

    code: str = "PUBLISH_FAILED"
    message: str = "Failed to publish"


class RenderFailedError(BuzzwordError):
    """Word-cloud rendering or image upload failed."""

    code: str = "RENDER_FAILED"
    message: str = "Failed to render word cloud"


class SigningError(BuzzwordError):
    """Key decoding or event signing failure."""

    code: str = "SIGNING_ERROR"
    message: str = "Failed to sign event"


class TransportError(BuzzwordError):
    """A single relay connection or delivery failed."""

    code: str = "TRANSPORT_ERROR"
    message: str = "Relay transport failure"

