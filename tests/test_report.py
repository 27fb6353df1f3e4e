from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from report import fmt_moeda, gerar_pdf_financeiro


def test_fmt_moeda():
    assert fmt_moeda(1234.5) == "1.234,50"
    assert fmt_moeda(Decimal("0")) == "0,00"
    assert fmt_moeda(None) == "0,00"


def test_pdf_vazio():
    pdf = gerar_pdf_financeiro([], date(2024, 3, 1))
    assert pdf.startswith(b"%PDF")


def test_pdf_com_registros():
    registros = [
        SimpleNamespace(
            anunciante=SimpleNamespace(nome_empresa="Pizzaria <Zé>"), anunciante_id=1,
            data_vencimento=date(2024, 3, 5), valor_contratado=Decimal("300"),
            valor_pago=Decimal("300"), data_pagamento=date(2024, 3, 4), status="pago",
        ),
        SimpleNamespace(
            anunciante=None, anunciante_id=2,
            data_vencimento=date(2024, 3, 10), valor_contratado=Decimal("150"),
            valor_pago=None, data_pagamento=None, status="atrasado",
        ),
    ]
    pdf = gerar_pdf_financeiro(registros, date(2024, 3, 1))
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000
