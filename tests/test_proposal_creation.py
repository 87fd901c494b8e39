import uuid
from datetime import date
from decimal import Decimal

import pytest

from fakes import auth_headers
from proposals.domain.entities import Bank, BankStatus, Client, InternalStatus
from proposals.domain.simulacao import calcular_parcela


@pytest.mark.parametrize("valor, taxa, prazo, esperado", [
    (1000, Decimal("1"), 12, Decimal("88.85")),
    (12000, 0, 12, Decimal("1000.00")),
    (None, Decimal("1.85"), 84, None),
    (15000, None, 84, None),
    (15000, Decimal("1.85"), None, None),
])
def test_calcular_parcela(valor, taxa, prazo, esperado):
    assert calcular_parcela(valor, taxa, prazo) == esperado


@pytest.fixture
def cenario(env):
    empresa = env.empresa(max_users=10)
    vendedor = env.usuario("vend@acme.com", role="vendedor", company_id=empresa.id)
    cliente = Client(
        id=str(uuid.uuid4()),
        company_id=empresa.id,
        cpf="12345678909",
        full_name="Maria da Silva",
        birth_date=date(1960, 5, 17),
        phone="11988887777",
    )
    banco = Bank(
        id=str(uuid.uuid4()),
        name="Facta Financeira",
        code="FACTA",
        possui_api=True,
        company_id=empresa.id,
    )
    env.proposals.clientes[cliente.id] = cliente
    env.proposals.bancos[banco.id] = banco
    return {"empresa": empresa, "vendedor": vendedor, "cliente": cliente, "banco": banco}


def _payload(cenario, **extra):
    payload = {
        "client_id": cenario["cliente"].id,
        "bank_id": cenario["banco"].id,
        "modality": "margem_livre",
        "covenant": "INSS",
        "requested_value": "15000",
        "term_months": 84,
        "interest_rate": "1.85",
    }
    payload.update(extra)
    return payload


def _criar(client, usuario, payload):
    return client.post("/proposals", headers=auth_headers(usuario), json=payload)


def test_cria_rascunho_nao_enviado(client, env, cenario):
    resp = _criar(client, cenario["vendedor"], _payload(cenario))
    assert resp.status_code == 200
    data = resp.json()["data"]

    assert data["internal_status"] == "rascunho"
    assert data["bank_status"] == "nao_enviado"
    assert data["seller_id"] == cenario["vendedor"].id
    assert data["company_id"] == cenario["empresa"].id
    assert data["protocolo_banco"] is None
    assert data["parcela_estimada"] == float(calcular_parcela(15000, Decimal("1.85"), 84))

    salva = env.proposals.propostas[data["id"]]
    assert salva.modality == "margem_livre"
    assert salva.covenant == "INSS"
    assert salva.bank_status == BankStatus.NAO_ENVIADO
    assert "criar_proposta" in env.audit.acoes()


def test_cria_pre_cadastrada_sem_banco(client, env, cenario):
    resp = _criar(client, cenario["vendedor"], _payload(cenario, bank_id=None, internal_status="pre_cadastrada"))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["internal_status"] == "pre_cadastrada"
    assert data["bank_id"] is None


def test_status_inicial_fora_do_permitido(client, env, cenario):
    resp = _criar(client, cenario["vendedor"], _payload(cenario, internal_status="aprovada"))
    assert resp.status_code == 400
    assert env.proposals.propostas == {}


def test_cliente_inexistente(client, env, cenario):
    resp = _criar(client, cenario["vendedor"], _payload(cenario, client_id=str(uuid.uuid4())))
    assert resp.status_code == 404
    assert resp.json()["error"] == "Cliente não encontrado"


def test_cliente_de_outra_empresa(client, env, cenario):
    outra = env.empresa(nome="Outra", cnpj="99888777000166")
    cenario["cliente"].company_id = outra.id

    resp = _criar(client, cenario["vendedor"], _payload(cenario))
    assert resp.status_code == 403
    assert env.proposals.propostas == {}


def test_cliente_inativo(client, env, cenario):
    cenario["cliente"].is_active = False

    resp = _criar(client, cenario["vendedor"], _payload(cenario))
    assert resp.status_code == 400
    assert resp.json()["error"] == "Cliente inativo"


def test_banco_de_outra_empresa(client, env, cenario):
    outra = env.empresa(nome="Outra", cnpj="99888777000166")
    cenario["banco"].company_id = outra.id

    resp = _criar(client, cenario["vendedor"], _payload(cenario))
    assert resp.status_code == 403


def test_banco_inexistente_ou_inativo(client, env, cenario):
    resp = _criar(client, cenario["vendedor"], _payload(cenario, bank_id=str(uuid.uuid4())))
    assert resp.status_code == 404

    cenario["banco"].is_active = False
    resp = _criar(client, cenario["vendedor"], _payload(cenario))
    assert resp.status_code == 400
    assert resp.json()["error"] == "Banco inativo"


def test_role_sem_permissao(client, env, cenario):
    auditor = env.usuario("auditor@acme.com", role="auditor", company_id=cenario["empresa"].id)
    resp = _criar(client, auditor, _payload(cenario))
    assert resp.status_code == 403


def test_valor_solicitado_deve_ser_positivo(client, env, cenario):
    resp = _criar(client, cenario["vendedor"], _payload(cenario, requested_value="0"))
    assert resp.status_code == 400
    assert "requested_value" in resp.json()["error"]


# ---------------------------------------------------------------------------
# 📋 Consulta
# ---------------------------------------------------------------------------

def test_vendedor_lista_so_as_proprias_e_gerente_todas(client, env, cenario):
    colega = env.usuario("colega@acme.com", role="vendedor", company_id=cenario["empresa"].id)
    gerente = env.usuario("gerente@acme.com", role="gerente", company_id=cenario["empresa"].id)
    minha = _criar(client, cenario["vendedor"], _payload(cenario)).json()["data"]["id"]
    _criar(client, colega, _payload(cenario))

    resp = client.get("/proposals", headers=auth_headers(cenario["vendedor"]))
    assert [p["id"] for p in resp.json()["data"]] == [minha]

    resp = client.get("/proposals", headers=auth_headers(gerente))
    assert len(resp.json()["data"]) == 2


def test_filtro_por_status(client, env, cenario):
    _criar(client, cenario["vendedor"], _payload(cenario))
    pre = _criar(client, cenario["vendedor"], _payload(cenario, internal_status="pre_cadastrada")).json()["data"]

    resp = client.get(
        "/proposals",
        headers=auth_headers(cenario["vendedor"]),
        params={"internal_status": InternalStatus.PRE_CADASTRADA.value},
    )
    assert [p["id"] for p in resp.json()["data"]] == [pre["id"]]


def test_detalhe_de_proposta_de_outro_vendedor(client, env, cenario):
    colega = env.usuario("colega@acme.com", role="vendedor", company_id=cenario["empresa"].id)
    proposta = _criar(client, colega, _payload(cenario)).json()["data"]

    resp = client.get(f"/proposals/{proposta['id']}", headers=auth_headers(cenario["vendedor"]))
    assert resp.status_code == 403

    resp = client.get(f"/proposals/{proposta['id']}", headers=auth_headers(colega))
    assert resp.status_code == 200
    assert resp.json()["data"]["client_id"] == cenario["cliente"].id


def test_detalhe_de_proposta_inexistente(client, cenario):
    resp = client.get(f"/proposals/{uuid.uuid4()}", headers=auth_headers(cenario["vendedor"]))
    assert resp.status_code == 404


def test_proposta_cadastrada_pode_ser_enviada_a_facta(client, env, cenario):
    proposta = _criar(client, cenario["vendedor"], _payload(cenario)).json()["data"]

    resp = client.post(
        "/enviar-proposta-facta",
        headers=auth_headers(cenario["vendedor"]),
        json={"proposal_id": proposta["id"]},
    )
    assert resp.status_code == 200
    assert resp.json()["protocolo"] == "FAC-123"
    assert env.proposals.propostas[proposta["id"]].bank_status == BankStatus.EM_ANALISE
