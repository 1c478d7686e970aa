"""Error types raised by the service layer.

Validation problems are never raised; they are returned as field -> message
mappings. Everything below is for failures at an external collaborator.
"""
from __future__ import annotations


class ServiceError(Exception):
    """Base class for service-layer failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PersistenceError(ServiceError):
    """The applications backend rejected or failed a write."""


class StorageReadError(ServiceError):
    """The local draft slot could not be read or parsed."""


class InvalidTransitionError(ServiceError):
    """A form action was requested from a step (or phase) where it is not allowed."""


class SuggestionError(ServiceError):
    """Base class for suggestion failures. ``status_code`` is what the API answers with."""

    status_code = 502


class ConfigurationError(SuggestionError):
    status_code = 503


class QuotaExceededError(SuggestionError):
    status_code = 429


class AuthenticationError(SuggestionError):
    status_code = 502


class GenerationFailedError(SuggestionError):
    status_code = 502


class EmptyResultError(SuggestionError):
    status_code = 502
