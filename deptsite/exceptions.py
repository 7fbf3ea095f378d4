"""Central application exception hierarchy.

This module defines the base application exception ``AppError`` and the
specialized subclasses used to represent the failure modes of talking to the
remote public API (configuration, missing records, HTTP status failures,
network failures and malformed payloads). Using a centralized hierarchy makes
error handling at the page composition boundary and in tests consistent.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Base exception for all application-level errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'TRANSPORT_ERROR'``).
    message : str
        Short human-readable sentence describing the error.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.
    transient : bool, optional
        Whether the error is temporary and the caller may retry.

    Attributes
    ----------
    code : str
        Stable machine-readable error code.
    message : str
        Human-readable message.
    context : dict
        Structured, non-sensitive context for logging.
    transient : bool
        True if the error is transient.

    Examples
    --------
    >>> e = AppError('CODE', 'message', context={'k': 'v'}, transient=True)
    >>> e.code
    'CODE'
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})
        self.transient = bool(transient)

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
            "is_transient": self.transient,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing configuration.

    An unset or unmapped department code is a known unconfigured state and is
    reported through page state, not through this exception.
    """

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "CONFIGURATION_ERROR", message, context=context, transient=False
        )


class TransportError(AppError):
    """Raised when the remote API answers with a non-2xx HTTP status.

    Parameters
    ----------
    status : int
        The numeric HTTP status returned by the server.
    message : str, optional
        Human-readable message; defaults to a sentence naming the status.
    context : Mapping[str, Any] | None, optional
        Optional structured context (typically the request URL).
    """

    def __init__(
        self,
        status: int,
        message: str | None = None,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        merged = {"status": status, **dict(context or {})}
        super().__init__(
            "TRANSPORT_ERROR",
            message or f"Public API returned HTTP {status}.",
            context=merged,
            transient=status >= 500 or status == 429,
        )
        self.status = int(status)


class NotFoundError(TransportError):
    """Raised when a resolved identity has no remote record (HTTP 404)."""

    def __init__(
        self, message: str | None = None, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            404, message or "The requested record was not found.", context=context
        )
        self.code = "NOT_FOUND_ERROR"


class NetworkError(AppError):
    """Raised when a request never reached or never returned from the server.

    The underlying ``aiohttp``/timeout exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str = "Unable to reach the public API.",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__("NETWORK_ERROR", message, context=context, transient=True)


class DecodeError(AppError):
    """Raised for a 2xx response whose body is not the expected JSON."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("DECODE_ERROR", message, context=context, transient=False)
