"""Certificate endpoints — public validation and template previews."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from culturaviva.api.deps import get_certificate_client, get_settings
from culturaviva.config import Settings
from culturaviva.contracts.certificate import CertificateTemplate
from culturaviva.services.certificates.certificate_client import CertificateClient
from culturaviva.services.certificates.errors import CertificateLookupError, MissingVariableError
from culturaviva.services.certificates.rendering import (
    TEMPLATE_VARIABLES,
    certificate_values,
    render_template,
)

router = APIRouter(prefix="/certificates", tags=["certificates"])


class PreviewRequest(BaseModel):
    template: CertificateTemplate
    values: dict[str, str] = Field(default_factory=dict)
    code: str | None = Field(
        default=None, description="Fill built-in variables from this issued certificate"
    )
    strict: bool = False


@router.get("/{code}/validation")
async def validate_certificate(
    code: str,
    client: CertificateClient = Depends(get_certificate_client),
) -> dict[str, Any]:
    """Check a certificate code: VALID, INVALID or REVOKED."""
    try:
        validation = await client.validate(code)
    except CertificateLookupError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    result = validation.model_dump(mode="json")
    result["is_valid"] = validation.is_valid
    return result


@router.get("/templates/variables")
async def list_variables() -> dict[str, str]:
    return TEMPLATE_VARIABLES


@router.post("/templates/preview")
async def preview_template(
    request: PreviewRequest,
    client: CertificateClient = Depends(get_certificate_client),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Render a template with explicit values and/or an issued certificate."""
    values: dict[str, str] = {}
    if request.code:
        try:
            validation = await client.validate(request.code)
        except CertificateLookupError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        if validation.data is None:
            raise HTTPException(status_code=404, detail="Certificate not found")
        values.update(certificate_values(validation.data))
    values.update(request.values)

    try:
        rendered = render_template(
            request.template, values, settings.validation_base_url, strict=request.strict
        )
    except MissingVariableError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return rendered.model_dump(mode="json")
