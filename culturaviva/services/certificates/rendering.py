"""Template placeholder resolution for certificate previews.

Element text may contain ``{{token}}`` placeholders (whitespace inside the
braces is tolerated). QR code elements always encode the public validation
URL of the certificate, ``{validation_base_url}/{code}``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import datetime

from culturaviva.contracts.certificate import (
    CertificateData,
    CertificateTemplate,
    RenderedCertificate,
    RenderedElement,
)
from culturaviva.contracts.enums import ElementType
from culturaviva.services.certificates.errors import MissingVariableError

logger = logging.getLogger(__name__)

TEMPLATE_VARIABLES: dict[str, str] = {
    "nome_visitante": "Visitor name",
    "nome_evento": "Event or exhibition name",
    "data_conclusao": "Completion date (dd/mm/yyyy)",
    "carga_cultural": "Cultural workload",
    "code": "Certificate validation code",
}

_TOKEN_RE = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")


def find_tokens(text: str | None) -> list[str]:
    """Distinct token names in *text*, in order of first appearance."""
    if not text:
        return []
    return list(dict.fromkeys(_TOKEN_RE.findall(text)))


def render_text(
    text: str | None, values: Mapping[str, str], strict: bool = False
) -> str:
    """Replace every ``{{token}}`` that has a value; leave the rest verbatim."""
    if not text:
        return ""
    if strict:
        missing = [t for t in find_tokens(text) if t not in values]
        if missing:
            raise MissingVariableError(missing)

    def _sub(match: re.Match[str]) -> str:
        name = match.group(1)
        return str(values[name]) if name in values else match.group(0)

    return _TOKEN_RE.sub(_sub, text)


def certificate_values(
    data: CertificateData,
    *,
    event_name: str | None = None,
    cultural_hours: str | None = None,
) -> dict[str, str]:
    """Built-in variable values for an issued certificate."""
    values = {"nome_visitante": data.visitor_name, "code": data.code}
    name = event_name or data.title
    if name:
        values["nome_evento"] = name
    if isinstance(data.issued_at, datetime):
        values["data_conclusao"] = data.issued_at.strftime("%d/%m/%Y")
    if cultural_hours:
        values["carga_cultural"] = cultural_hours
    return values


def render_template(
    template: CertificateTemplate,
    values: Mapping[str, str],
    validation_base_url: str,
    strict: bool = False,
) -> RenderedCertificate:
    """Instantiate *template* with *values*, keeping element order (z-order)."""
    base_url = validation_base_url.rstrip("/")
    unresolved: list[str] = []
    elements: list[RenderedElement] = []

    for element in template.elements:
        if element.type == ElementType.QRCODE:
            if "code" in values:
                content = f"{base_url}/{values['code']}"
            elif strict:
                raise MissingVariableError(["code"])
            else:
                content = element.text or ""
                unresolved.append("code")
        elif element.type == ElementType.IMAGE:
            content = element.src or ""
        else:
            content = render_text(element.text, values, strict=strict)
            unresolved.extend(find_tokens(content))

        elements.append(
            RenderedElement(
                id=element.id,
                type=element.type,
                x=element.x,
                y=element.y,
                width=element.width,
                height=element.height,
                rotate=element.rotate,
                content=content,
                font_size=element.font_size,
                font_family=element.font_family,
                color=element.color,
                align=element.align,
                opacity=element.opacity,
            )
        )

    unresolved = list(dict.fromkeys(unresolved))
    if unresolved:
        logger.debug("Template %r has unresolved tokens: %s", template.name, unresolved)
    return RenderedCertificate(
        name=template.name,
        background_url=template.background_url,
        dimensions=template.dimensions,
        elements=elements,
        unresolved_tokens=unresolved,
    )
