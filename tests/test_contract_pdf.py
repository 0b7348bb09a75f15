from coliving_service.app.services.contract_pdf import build_contract_pdf, is_pdf_data_url, to_data_url
from conftest import PNG_DATA_URL


def test_build_contract_pdf():
    text = "## Article 1\n**Objet** du contrat\n===\n- meublé\n[SIGNATURE:TENANT_SIGNATURE]"

    pdf = build_contract_pdf(text, reference="CTR-20250901-ABC123", signatures={"TENANT_SIGNATURE": PNG_DATA_URL})

    assert pdf.startswith(b"%PDF")


def test_build_contract_pdf_without_slots_adds_signature_block():
    pdf = build_contract_pdf("Texte libre avec <balises> & symboles")

    assert pdf.startswith(b"%PDF")


def test_pdf_data_url():
    data_url = to_data_url(b"%PDF-1.4")

    assert is_pdf_data_url(data_url)
    assert not is_pdf_data_url("Bonjour {{TENANT_FIRSTNAME}}")
    assert not is_pdf_data_url(None)
