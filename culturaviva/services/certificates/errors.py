"""Certificate service exceptions."""

from __future__ import annotations


class CertificateServiceError(Exception):
    """Base exception for certificate lookups and template storage."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class CertificateLookupError(CertificateServiceError):
    """Raised when a validation lookup fails for reasons other than "not found"."""


class TemplateStoreError(CertificateServiceError):
    """Raised when the template store rejects or fails a request."""


class MissingVariableError(CertificateServiceError):
    """Raised by strict rendering when a ``{{token}}`` has no value."""

    def __init__(self, tokens: list[str]):
        self.tokens = tokens
        super().__init__(f"No value for template variable(s): {', '.join(tokens)}")
