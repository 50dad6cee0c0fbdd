"""Tests for certificate and template contracts."""

import pytest
from pydantic import ValidationError

from culturaviva.contracts import (
    CertificateData,
    CertificateElement,
    CertificateTemplate,
    CertificateValidation,
    ElementType,
    VerificationStatus,
)


class TestCertificateTemplate:
    def test_camel_case_round_trip(self):
        template = CertificateTemplate.model_validate(
            {
                "name": "Visita guiada",
                "backgroundUrl": "https://cdn.test/bg.png",
                "elements": [
                    {
                        "id": "t1",
                        "type": "text",
                        "x": 100,
                        "y": 80,
                        "text": "{{nome_visitante}}",
                        "fontSize": 32,
                        "isLocked": True,
                    }
                ],
            }
        )
        assert template.background_url == "https://cdn.test/bg.png"
        assert template.elements[0].font_size == 32
        assert template.elements[0].is_locked

        dumped = template.to_api()
        assert dumped["backgroundUrl"] == "https://cdn.test/bg.png"
        assert dumped["elements"][0]["fontSize"] == 32
        assert dumped["elements"][0]["type"] == "text"
        assert dumped["dimensions"] == {"width": 842, "height": 595}

    def test_default_dimensions_are_a4_landscape(self):
        template = CertificateTemplate(name="Modelo")
        assert template.dimensions.width == 842
        assert template.dimensions.height == 595

    def test_unknown_element_type_rejected(self):
        with pytest.raises(ValidationError):
            CertificateElement(id="x", type="video", x=0, y=0)

    def test_opacity_bounds(self):
        with pytest.raises(ValidationError):
            CertificateElement(id="x", type=ElementType.TEXT, x=0, y=0, opacity=1.5)


class TestCertificateValidation:
    def test_is_valid(self):
        data = CertificateData(code="ABC123", visitor_name="Maria")
        assert CertificateValidation(
            code="ABC123", status=VerificationStatus.VALID, data=data
        ).is_valid
        assert not CertificateValidation(
            code="ABC123", status=VerificationStatus.REVOKED, data=data
        ).is_valid

    def test_extra_certificate_fields_kept(self):
        data = CertificateData.model_validate(
            {"code": "ABC123", "visitorName": "Maria", "museumName": "Museu da Cachaça"}
        )
        assert data.visitor_name == "Maria"
        assert data.model_extra["museumName"] == "Museu da Cachaça"
