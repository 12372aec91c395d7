from cartola_recon.normalization.extractors import (
    EXTRACTORS,
    extract_document_number,
    extract_rut_inline,
    extract_rut_slash,
    extract_statement_name,
    extract_transfer_name,
)


def test_rut_from_slash_token():
    assert extract_rut_slash("TRF/1234567/12345678K/JUAN", position=2) == "12345678K"
    assert extract_rut_slash("trf/1/12345678k", position=2) == "12345678K"
    assert extract_rut_slash("TRF/1234567", position=2) is None
    assert extract_rut_slash("TRF/1/ABC", position=2) is None
    assert extract_rut_slash(None, position=1) is None


def test_rut_inline():
    assert extract_rut_inline("TRANSF DE 12345678-9 JUAN PEREZ") == "123456789"
    assert extract_rut_inline("PAGO 7654321-k") == "7654321K"
    assert extract_rut_inline("PAGO PROVEEDOR") is None
    assert extract_rut_inline(12345678) is None


def test_transfer_name():
    assert extract_transfer_name("TRANSFER JUAN PEREZ/123") == "JUAN PEREZ"
    assert extract_transfer_name("transfer juan perez") is None
    assert extract_transfer_name("transfer juan perez", uppercase=True) == "JUAN PEREZ"
    assert extract_transfer_name("DEPOSITO") is None


def test_statement_name_after_rut():
    assert extract_statement_name("TRANSF 12345678-9 Juan Perez") == "JUAN PEREZ"


def test_statement_name_after_prefix():
    assert extract_statement_name("ABONO DE MARIA LOPEZ") == "MARIA LOPEZ"
    assert extract_statement_name("PAGO AL PROVEEDOR SA") == "PROVEEDOR SA"


def test_statement_name_skips_rut_label():
    assert extract_statement_name("TRANSFERENCIA DE RUT 12345") is None
    assert extract_statement_name("") is None


def test_document_number():
    assert extract_document_number("TRF/1234567/12345678K") == "1234567"
    assert extract_document_number("PAGO NOMINA EN LINEA-1234567") == "1234567"
    assert extract_document_number("TRF/ABC/X-1234567") == "1234567"
    assert extract_document_number("PAGO PROVEEDOR") is None
    assert extract_document_number(None) is None


def test_dialect_bundles():
    bci_statement, bci_ledger = EXTRACTORS["bci"]
    assert bci_statement.rut("TRANSF 12345678-9 JUAN") is None
    assert bci_ledger.rut("TRF/1234567/12345678K") == "12345678K"
    assert bci_ledger.document("TRF/1234567/12345678K") == "1234567"

    estado_statement, estado_ledger = EXTRACTORS["estado"]
    assert estado_statement.rut("TRANSF 12345678-9 JUAN") == "123456789"
    assert estado_ledger.rut("transfer juan/123456789") == "123456789"
    assert estado_ledger.name("transfer juan/123456789") == "JUAN"
    assert estado_ledger.document is None
