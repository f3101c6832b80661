"""
Lumina Exceptions
=================
Error taxonomy shared by the search providers, the completion pipeline and
the action boundary.

A provider that opts out of a query does not raise; it returns an outcome
in the NOT_APPLICABLE state.
"""
from typing import Optional


class LuminaError(Exception):
    """Base exception for everything raised inside lumina."""


# ─────────────────────────── Search ───────────────────────────

class ProviderFailure(LuminaError):
    """A result provider failed; the resolver turns this into zero results."""


class ExpressionError(ProviderFailure):
    """A query looked like arithmetic but could not be evaluated."""


# ─────────────────────────── Completion ───────────────────────────

class ConfigurationError(LuminaError):
    """Missing API key or unsupported AI service. Never retried."""


class TransportError(LuminaError):
    """Non-success HTTP status or a connection dropped mid-stream."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class FrameParseError(LuminaError):
    """One `data:` line could not be parsed. Skipped, never fatal."""
