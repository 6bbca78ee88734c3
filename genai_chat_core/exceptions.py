"""Exception hierarchy for GenAI Chat Core.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from GenaiCoreError, providing a consistent error handling interface.

Input errors (roles, message shapes, request options) abort the operation before any
history is mutated. Service errors are raised by the model-call layer and propagate
unchanged to the caller. Citation resolution never raises these; it degrades to the
original URL instead.
"""


class GenaiCoreError(Exception):
    """Base exception for all GenAI Chat Core errors."""


class ConfigError(GenaiCoreError):
    """Raised when required configuration (e.g. the API key) is missing or invalid."""


class InvalidRoleError(GenaiCoreError):
    """Raised when a turn's role is neither "user" nor "model"."""

    def __init__(self, role: object):
        self.role = role
        super().__init__(f"Role must be user or model, but got {role!r}")


class InvalidMessageError(GenaiCoreError):
    """Raised when Chat.send() receives a message of an unsupported shape."""


class InvalidContentError(GenaiCoreError):
    """Raised when request contents cannot be normalized into turns."""


class InvalidRequestError(GenaiCoreError):
    """Raised for unknown tools or request options that collide with the request body."""


class ImageDownloadError(GenaiCoreError):
    """Raised when an image URL referenced in the contents cannot be downloaded."""


class APIError(GenaiCoreError):
    """Raised when the service answers with a non-success status code."""

    _label = "Unexpected response"

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{self._label} error: {status_code} - {body}")


class ClientError(APIError):
    """Raised for 4xx responses (bad request, auth, quota)."""

    _label = "Client"


class ServerError(APIError):
    """Raised for 5xx responses."""

    _label = "Server"


class MalformedResponseError(GenaiCoreError):
    """Raised when a success response body is not a valid GenerateContent payload."""


class TransportError(GenaiCoreError):
    """Raised when the request could not be delivered (connection, timeout)."""
