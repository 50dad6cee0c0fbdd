"""Platform backend client for certificates.

Endpoints:
- ``GET /public/certificates/{code}`` → ``{valid: bool, data: {...}}``
- ``/certificate-templates`` → template CRUD (camelCase JSON)
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from culturaviva.config import Settings
from culturaviva.contracts.certificate import (
    CertificateData,
    CertificateTemplate,
    CertificateValidation,
)
from culturaviva.contracts.enums import VerificationStatus
from culturaviva.services.certificates.errors import CertificateLookupError, TemplateStoreError

logger = logging.getLogger(__name__)

VALIDATION_PATH = "/public/certificates"
TEMPLATES_PATH = "/certificate-templates"


class CertificateClient:
    """Async HTTP client for certificate validation and templates."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or Settings()
        self._client = http_client or httpx.AsyncClient(timeout=settings.http_timeout_s)
        self._base_url = (base_url or settings.api_base_url).rstrip("/")

    # ------------------------------------------------------------------
    # Public validation
    # ------------------------------------------------------------------

    async def validate(self, code: str) -> CertificateValidation:
        """Look up a certificate by its public code.

        A 404 or ``valid: false`` means the code is unknown (INVALID); a
        certificate flagged ``revoked`` is REVOKED. Anything else that goes
        wrong raises ``CertificateLookupError``.
        """
        code = code.strip()
        if not code:
            return CertificateValidation(code=code, status=VerificationStatus.INVALID)

        url = f"{self._base_url}{VALIDATION_PATH}/{quote(code, safe='')}"
        try:
            resp = await self._client.get(url)
            if resp.status_code == 404:
                logger.info("Certificate %s not found", code)
                return CertificateValidation(code=code, status=VerificationStatus.INVALID)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Certificate lookup %s failed with HTTP %s", code, exc.response.status_code
            )
            raise CertificateLookupError(
                "Certificate service returned an error", exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Certificate lookup %s failed: %s", code, exc)
            raise CertificateLookupError("Certificate service unreachable") from exc
        except ValueError as exc:
            raise CertificateLookupError("Certificate service sent invalid JSON") from exc

        if not isinstance(body, dict) or not body.get("valid"):
            logger.info("Certificate %s is not valid", code)
            return CertificateValidation(code=code, status=VerificationStatus.INVALID)

        raw = body.get("data") or {}
        try:
            data = CertificateData.model_validate({"code": code, **raw})
        except (TypeError, ValidationError) as exc:
            raise CertificateLookupError("Certificate payload could not be parsed") from exc

        status = VerificationStatus.REVOKED if data.revoked else VerificationStatus.VALID
        logger.info("Certificate %s is %s", code, status.value)
        return CertificateValidation(code=code, status=status, data=data)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    async def list_templates(self) -> list[CertificateTemplate]:
        body = await self._request("GET", TEMPLATES_PATH)
        if isinstance(body, dict):
            body = body.get("data") or []
        try:
            return [CertificateTemplate.model_validate(t) for t in body]
        except (TypeError, ValidationError) as exc:
            raise TemplateStoreError("Template list could not be parsed") from exc

    async def get_template(self, template_id: str) -> CertificateTemplate | None:
        """Return the template with *template_id*, or None.

        The backend has no single-template read; the list is filtered.
        """
        for template in await self.list_templates():
            if template.id == template_id:
                return template
        return None

    async def create_template(self, template: CertificateTemplate) -> CertificateTemplate:
        payload = template.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude={"id"}
        )
        body = await self._request("POST", TEMPLATES_PATH, json=payload)
        return self._parse_template(body, fallback=template)

    async def update_template(
        self, template_id: str, template: CertificateTemplate
    ) -> CertificateTemplate:
        body = await self._request(
            "PUT", f"{TEMPLATES_PATH}/{quote(template_id, safe='')}", json=template.to_api()
        )
        fallback = template.model_copy(update={"id": template_id})
        return self._parse_template(body, fallback=fallback)

    async def delete_template(self, template_id: str) -> None:
        await self._request("DELETE", f"{TEMPLATES_PATH}/{quote(template_id, safe='')}")
        logger.info("Template %s deleted", template_id)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{path}"
        try:
            resp = await self._client.request(method, url, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("%s %s failed with HTTP %s", method, path, exc.response.status_code)
            raise TemplateStoreError(
                f"Template request failed ({method} {path})", exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TemplateStoreError("Template service unreachable") from exc

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise TemplateStoreError("Template service sent invalid JSON") from exc

    @staticmethod
    def _parse_template(body: Any, fallback: CertificateTemplate) -> CertificateTemplate:
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            body = body["data"]
        if not isinstance(body, dict):
            return fallback
        try:
            return CertificateTemplate.model_validate(body)
        except ValidationError as exc:
            raise TemplateStoreError("Template payload could not be parsed") from exc
