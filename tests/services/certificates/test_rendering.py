"""Tests for template placeholder resolution."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from culturaviva.contracts.certificate import (
    CertificateData,
    CertificateElement,
    CertificateTemplate,
)
from culturaviva.contracts.enums import ElementType
from culturaviva.services.certificates.errors import MissingVariableError
from culturaviva.services.certificates.rendering import (
    TEMPLATE_VARIABLES,
    certificate_values,
    find_tokens,
    render_template,
    render_text,
)

VALUES = {"nome_visitante": "Maria Oliveira", "nome_evento": "Noite dos Museus", "code": "CV-42"}


def _template() -> CertificateTemplate:
    return CertificateTemplate(
        name="Visita",
        background_url="https://cdn.test/bg.png",
        elements=[
            CertificateElement(
                id="title", type=ElementType.TEXT, x=0, y=0, text="Certificado", font_size=40
            ),
            CertificateElement(
                id="who",
                type=ElementType.VARIABLE,
                x=0,
                y=60,
                text="Certificamos que {{ nome_visitante }} participou de {{nome_evento}}",
            ),
            CertificateElement(
                id="qr",
                type=ElementType.QRCODE,
                x=700,
                y=450,
                width=100,
                height=100,
                text="QR Code",
            ),
            CertificateElement(
                id="logo", type=ElementType.IMAGE, x=10, y=500, src="https://cdn.test/logo.png"
            ),
        ],
    )


class TestRenderText:
    def test_builtin_variables(self):
        assert set(TEMPLATE_VARIABLES) == {
            "nome_visitante",
            "nome_evento",
            "data_conclusao",
            "carga_cultural",
            "code",
        }

    def test_find_tokens(self):
        assert find_tokens("{{a}} e {{ b }} e {{a}}") == ["a", "b"]
        assert find_tokens(None) == []

    def test_whitespace_tolerant(self):
        assert render_text("Olá, {{  nome_visitante }}!", VALUES) == "Olá, Maria Oliveira!"

    def test_unknown_token_left_verbatim(self):
        assert render_text("{{carga_cultural}} horas", VALUES) == "{{carga_cultural}} horas"

    def test_strict_raises(self):
        with pytest.raises(MissingVariableError) as exc_info:
            render_text("{{carga_cultural}} e {{data_conclusao}}", VALUES, strict=True)
        assert exc_info.value.tokens == ["carga_cultural", "data_conclusao"]

    def test_empty(self):
        assert render_text(None, VALUES) == ""


class TestRenderTemplate:
    def test_resolves_elements_in_order(self):
        rendered = render_template(_template(), VALUES, "https://culturaviva.app/verify/")

        assert [e.id for e in rendered.elements] == ["title", "who", "qr", "logo"]
        by_id = {e.id: e for e in rendered.elements}
        assert by_id["title"].content == "Certificado"
        assert by_id["title"].font_size == 40
        assert by_id["who"].content == (
            "Certificamos que Maria Oliveira participou de Noite dos Museus"
        )
        assert by_id["qr"].content == "https://culturaviva.app/verify/CV-42"
        assert by_id["logo"].content == "https://cdn.test/logo.png"
        assert rendered.unresolved_tokens == []
        assert rendered.dimensions.width == 842

    def test_reports_unresolved(self):
        rendered = render_template(_template(), {"nome_visitante": "Ana"}, "https://v.test")
        assert rendered.unresolved_tokens == ["nome_evento", "code"]
        qr = next(e for e in rendered.elements if e.id == "qr")
        assert qr.content == "QR Code"

    def test_strict_missing_code(self):
        with pytest.raises(MissingVariableError):
            render_template(
                _template(),
                {"nome_visitante": "Ana", "nome_evento": "X"},
                "https://v.test",
                strict=True,
            )


class TestCertificateValues:
    def test_from_certificate(self):
        data = CertificateData(
            code="CV-42",
            visitor_name="Maria Oliveira",
            title="Noite dos Museus",
            issued_at=datetime(2025, 5, 18, 21, 0, tzinfo=timezone.utc),
        )
        values = certificate_values(data, cultural_hours="4h")
        assert values == {
            "nome_visitante": "Maria Oliveira",
            "code": "CV-42",
            "nome_evento": "Noite dos Museus",
            "data_conclusao": "18/05/2025",
            "carga_cultural": "4h",
        }

    def test_event_name_overrides_title(self):
        data = CertificateData(code="C", visitor_name="Ana", title="Genérico")
        assert certificate_values(data, event_name="Oficina")["nome_evento"] == "Oficina"
