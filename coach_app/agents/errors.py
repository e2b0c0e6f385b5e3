from __future__ import annotations


class CoachError(Exception):
    """Base error for a coach invocation that must surface as a failure response."""

    status_code = 500


class InvalidRequestError(CoachError):
    """Missing message or user id."""

    status_code = 400


class ConfigurationError(CoachError):
    """A required upstream credential is not configured."""


class TextGenerationError(CoachError):
    """The external text generator failed or returned nothing."""
