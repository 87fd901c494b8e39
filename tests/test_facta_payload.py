from datetime import date
from decimal import Decimal

import pytest

from proposals.domain.entities import Client, Proposal
from proposals.domain.facta_payload import montar_payload_facta


def _cliente():
    return Client(
        id="c1",
        company_id="e1",
        cpf="12345678909",
        full_name="Maria da Silva",
        birth_date=date(1960, 5, 17),
        phone="11988887777",
    )


def _proposta(modality="margem_livre", **extra):
    dados = dict(
        id="p1",
        company_id="e1",
        client_id="c1",
        seller_id="u1",
        bank_id="b1",
        modality=modality,
        requested_value=Decimal("15000.00"),
        term_months=84,
        interest_rate=Decimal("1.8500"),
        covenant="INSS",
    )
    dados.update(extra)
    return Proposal(**dados)


def test_margem_livre_inclui_convenio():
    payload = montar_payload_facta(_proposta(), _cliente())
    assert payload == {
        "cpf": "12345678909",
        "nome": "Maria da Silva",
        "data_nascimento": "1960-05-17",
        "telefone": "11988887777",
        "valor_solicitado": 15000.0,
        "prazo": 84,
        "taxa": 1.85,
        "convenio": "INSS",
        "tipo_operacao": "MARGEM",
    }


@pytest.mark.parametrize("modality, tipo", [
    ("fgts_antecipacao", "FGTS"),
    ("credito_trabalhador", "CREDITO_TRABALHADOR"),
])
def test_modalidades_sem_convenio(modality, tipo):
    payload = montar_payload_facta(_proposta(modality), _cliente())
    assert "convenio" not in payload
    assert payload["tipo_operacao"] == tipo


@pytest.mark.parametrize("modality, tipo", [
    ("portabilidade", "PORTABILIDADE"),
    ("port_refinanciamento", "PORT_REFIN"),
    ("cartao_consignado", "CARTAO_RMC"),
])
def test_tipo_operacao_mapeado(modality, tipo):
    payload = montar_payload_facta(_proposta(modality), _cliente())
    assert payload["tipo_operacao"] == tipo
    assert payload["convenio"] == "INSS"


def test_modalidade_desconhecida_vira_maiuscula_com_convenio():
    payload = montar_payload_facta(_proposta("xyz"), _cliente())
    assert payload["tipo_operacao"] == "XYZ"
    assert payload["convenio"] == "INSS"


def test_dados_bancarios_apenas_quando_informados():
    sem = montar_payload_facta(_proposta(), _cliente())
    assert not {"agencia", "conta", "tipo_conta", "chave_pix"} & set(sem)

    com = montar_payload_facta(
        _proposta(bank_agency="0001", bank_account="12345-6", bank_account_type="corrente"),
        _cliente(),
    )
    assert com["agencia"] == "0001"
    assert com["conta"] == "12345-6"
    assert com["tipo_conta"] == "corrente"
    assert "chave_pix" not in com
