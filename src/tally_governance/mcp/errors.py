# src/tally_governance/mcp/errors.py
"""Exception types raised by the Tally governance tools."""

from __future__ import annotations

from typing import Optional


class TallyError(Exception):
    """Base exception for Tally tool errors."""

    pass


class ConfigError(TallyError):
    """Raised when required configuration (e.g. the API key) is missing."""

    pass


class ValidationError(TallyError):
    """Malformed or missing argument, detected before any network call."""

    pass


class NotFound(TallyError):
    """A slug or id resolved to no record."""

    pass


class AmbiguousIdentifier(TallyError):
    """A governor id was given without a slug to resolve the organization from."""

    pass


class UpstreamError(TallyError):
    """Transport or GraphQL failure reported by the Tally API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class UnknownTool(TallyError):
    def __init__(self, name: str):
        self.tool_name = name
        super().__init__(f"Unknown tool: {name}")


def rewrap(exc: Exception, prefix: str) -> TallyError:
    """Return a copy of ``exc`` whose message is prefixed, keeping its class.

    Non-Tally exceptions become UpstreamError so callers only ever see the
    taxonomy above.
    """
    message = f"{prefix}: {exc}"
    if isinstance(exc, UpstreamError):
        return UpstreamError(message, status_code=exc.status_code)
    if isinstance(exc, UnknownTool):
        return exc
    if isinstance(exc, TallyError):
        return type(exc)(message)
    return UpstreamError(message)
