"""Exception hierarchy for diagram extraction, registration and rendering."""

from __future__ import annotations


class DiagramError(Exception):
    """Base class for all markdoc diagram errors."""


class ConfigurationError(DiagramError):
    """Raised when a renderer registration is invalid."""


class NotFoundError(DiagramError):
    """Raised when no renderer is registered for a diagram language."""

    def __init__(self, language: str) -> None:
        self.language = language
        super().__init__(f"No renderer registered for language: {language}")


class InitializationError(DiagramError):
    """Raised when a renderer cannot prepare its backend."""

    def __init__(self, backend: str, reason: str) -> None:
        self.backend = backend
        self.reason = reason
        super().__init__(f"{backend} initialization failed: {reason}")


class RenderError(DiagramError):
    """Raised when a backend rejects diagram source or fails internally."""

    def __init__(self, message: str, language: str | None = None) -> None:
        self.language = language
        super().__init__(message)

    @property
    def original_message(self) -> str:
        """Message of the root failure, following the ``__cause__`` chain."""
        exc: BaseException = self
        while exc.__cause__ is not None:
            exc = exc.__cause__
        return str(exc)
