"""Certificate validation results and certificate templates.

Templates are persisted by the platform backend at ``/certificate-templates``
as camelCase JSON documents. ``{{token}}`` placeholders inside element text
are resolved at issuance time (server side) or for previews
(``culturaviva.services.certificates.rendering``).
"""

from datetime import datetime

from pydantic import ConfigDict, Field

from culturaviva.contracts.common import CamelModel
from culturaviva.contracts.enums import ElementType, TextAlign, VerificationStatus

DEFAULT_TEMPLATE_WIDTH = 842  # A4 landscape, points
DEFAULT_TEMPLATE_HEIGHT = 595


class CertificateData(CamelModel):
    """Public data of an issued certificate."""

    model_config = ConfigDict(extra="allow")

    code: str
    visitor_name: str
    issuer_name: str | None = None
    issuer_logo: str | None = None
    title: str | None = None
    type: str | None = None
    description: str | None = None
    issued_at: datetime | None = None
    id: str | None = None
    revoked: bool = False


class CertificateValidation(CamelModel):
    """Outcome of a public certificate lookup by code."""

    code: str
    status: VerificationStatus
    data: CertificateData | None = None

    @property
    def is_valid(self) -> bool:
        return self.status == VerificationStatus.VALID


class CertificateElement(CamelModel):
    """A positioned element on a certificate template canvas."""

    id: str = Field(..., min_length=1)
    type: ElementType
    x: float
    y: float
    width: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    rotate: float = 0.0

    text: str | None = None
    src: str | None = Field(default=None, description="Image URL for image elements")

    font_size: float | None = Field(default=None, gt=0)
    font_family: str | None = None
    color: str | None = None
    align: TextAlign | None = None
    opacity: float | None = Field(default=None, ge=0, le=1)

    is_locked: bool = False


class TemplateDimensions(CamelModel):
    width: int = Field(default=DEFAULT_TEMPLATE_WIDTH, gt=0)
    height: int = Field(default=DEFAULT_TEMPLATE_HEIGHT, gt=0)


class CertificateTemplate(CamelModel):
    """A certificate layout: background plus ordered elements (last drawn on top)."""

    id: str | None = None
    name: str = Field(..., min_length=1, max_length=200)
    background_url: str = ""
    elements: list[CertificateElement] = Field(default_factory=list)
    dimensions: TemplateDimensions = Field(default_factory=TemplateDimensions)


class RenderedElement(CamelModel):
    """A template element with every placeholder resolved."""

    id: str
    type: ElementType
    x: float
    y: float
    width: float | None = None
    height: float | None = None
    rotate: float = 0.0
    content: str = Field(..., description="Resolved text, QR payload or image URL")
    font_size: float | None = None
    font_family: str | None = None
    color: str | None = None
    align: TextAlign | None = None
    opacity: float | None = None


class RenderedCertificate(CamelModel):
    """A template instantiated for one certificate — used for previews."""

    name: str
    background_url: str
    dimensions: TemplateDimensions
    elements: list[RenderedElement]
    unresolved_tokens: list[str] = Field(default_factory=list)
