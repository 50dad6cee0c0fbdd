"""Cultura Viva data contracts — Pydantic v2 models for navigation and certificates.

Data authority
--------------

**Platform REST backend** (source of truth, consumed over HTTP):
- ``Route`` — computed by ``POST /navigation/directions``
- ``CertificateValidation`` — ``GET /public/certificates/{code}``
- ``CertificateTemplate`` — ``/certificate-templates`` CRUD

**Device** (pushed in, never stored):
- ``PositionFix`` — raw GPS readings

Calculated (never persisted)
----------------------------
- ``ProgressUpdate`` — per-fix remaining distance, step index, arrival
- ``NavigationSnapshot`` — view of a live session (API response DTO)
- ``RenderedCertificate`` — template preview with placeholders resolved
"""

from culturaviva.contracts.enums import (
    ElementType,
    NavigationErrorCode,
    NavigationState,
    RecoveryAction,
    RouteType,
    TextAlign,
    TravelProfile,
    VerificationStatus,
)
from culturaviva.contracts.common import ApiModel, CamelModel, Destination, GeoPoint
from culturaviva.contracts.result import ServiceError
from culturaviva.contracts.navigation import (
    NavigationSnapshot,
    PositionFix,
    ProgressUpdate,
    Route,
    RouteStep,
)
from culturaviva.contracts.certificate import (
    CertificateData,
    CertificateElement,
    CertificateTemplate,
    CertificateValidation,
    RenderedCertificate,
    RenderedElement,
    TemplateDimensions,
)

__all__ = [
    # Enums
    "ElementType",
    "NavigationErrorCode",
    "NavigationState",
    "RecoveryAction",
    "RouteType",
    "TextAlign",
    "TravelProfile",
    "VerificationStatus",
    # Common
    "ApiModel",
    "CamelModel",
    "Destination",
    "GeoPoint",
    # Result
    "ServiceError",
    # Navigation
    "NavigationSnapshot",
    "PositionFix",
    "ProgressUpdate",
    "Route",
    "RouteStep",
    # Certificates
    "CertificateData",
    "CertificateElement",
    "CertificateTemplate",
    "CertificateValidation",
    "RenderedCertificate",
    "RenderedElement",
    "TemplateDimensions",
]
