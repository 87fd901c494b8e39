from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from dashboard.domain.metrics import calcular_comissao, projecao_mensal, ranking_vendedores, resumo_mensal
from fakes import auth_headers


def _vendas(linhas):
    return pd.DataFrame(linhas, columns=[
        "id", "seller_id", "seller_name", "released_value", "commission_value", "sale_date", "status",
    ])


@pytest.fixture
def vendas_junho():
    return _vendas([
        ("1", "u1", "Ana", Decimal("5000.00"), Decimal("250.00"), date(2025, 6, 2), "pago"),
        ("2", "u1", "Ana", Decimal("3000.00"), Decimal("150.00"), date(2025, 6, 5), "pago"),
        ("3", "u2", "Bruno", Decimal("10000.00"), Decimal("300.00"), date(2025, 6, 6), "pago"),
        ("4", "u2", "Bruno", Decimal("7000.00"), Decimal("210.00"), date(2025, 6, 8), "em_andamento"),
        ("5", "u3", "Caio", Decimal("2000.00"), Decimal("40.00"), date(2025, 6, 9), "cancelado"),
        ("6", "u1", "Ana", Decimal("9999.00"), Decimal("999.00"), date(2025, 5, 30), "pago"),
    ])


def test_calcular_comissao():
    fracao, valor = calcular_comissao(Decimal("10000"), Decimal("2.5"))
    assert fracao == Decimal("0.0250")
    assert valor == Decimal("250.00")

    fracao, valor = calcular_comissao(1234.56, 3.333)
    assert fracao == Decimal("0.0333")
    assert valor == Decimal("41.11")


def test_resumo_mensal(vendas_junho):
    resumo = resumo_mensal(vendas_junho, 2025, 6, meta=20000)
    assert resumo["total_vendas"] == 5
    assert resumo["vendas_pagas"] == 3
    assert resumo["valor_liberado"] == 18000.0
    assert resumo["comissoes"] == 700.0
    assert resumo["comissao_media"] == pytest.approx(233.33)
    assert resumo["ticket_medio"] == 6000.0
    assert resumo["progresso_meta"] == 90.0


def test_resumo_sem_vendas():
    resumo = resumo_mensal(_vendas([]), 2025, 6)
    assert resumo["total_vendas"] == 0
    assert resumo["ticket_medio"] == 0.0
    assert resumo["progresso_meta"] == 0.0


def test_projecao_mensal(vendas_junho):
    # dia 10 de 30: 3 vendas pagas, R$ 18.000 e R$ 700 de comissão
    proj = projecao_mensal(vendas_junho, date(2025, 6, 10), meta=20000)
    assert proj["dias_no_mes"] == 30
    assert proj["dias_restantes"] == 20
    assert proj["media_diaria_receita"] == 1800.0
    assert proj["receita_projetada"] == 54000.0
    assert proj["vendas_projetadas"] == 9
    assert proj["comissao_projetada"] == pytest.approx(2100.0)
    assert proj["diferenca_meta"] == -34000.0
    assert proj["vai_bater_meta"] is True


def test_projecao_sem_vendas_nao_divide_por_zero():
    proj = projecao_mensal(_vendas([]), date(2025, 2, 1))
    assert proj["dias_restantes"] == 27
    assert proj["receita_projetada"] == 0.0
    assert proj["comissao_projetada"] == 0.0
    assert proj["vai_bater_meta"] is False


def test_ranking_por_receita(vendas_junho):
    ranking = ranking_vendedores(vendas_junho, 2025, 6)
    assert [r["nome"] for r in ranking] == ["Bruno", "Ana"]
    assert ranking[0] == {
        "posicao": 1,
        "seller_id": "u2",
        "nome": "Bruno",
        "receita": 10000.0,
        "vendas": 1,
        "comissao": 300.0,
    }
    assert ranking[1]["vendas"] == 2


def test_ranking_limita_top_10():
    linhas = [
        (str(i), f"u{i}", f"Vendedor {i}", Decimal(1000 + i), Decimal("10"), date(2025, 6, 1), "pago")
        for i in range(15)
    ]
    ranking = ranking_vendedores(_vendas(linhas), 2025, 6)
    assert len(ranking) == 10
    assert ranking[0]["seller_id"] == "u14"


# ---------------------------------------------------------------------------
# 🌐 Rotas
# ---------------------------------------------------------------------------

def _registrar(client, usuario, valor, status="pago", percentual="5"):
    hoje = date.today()
    return client.post("/sales", headers=auth_headers(usuario), json={
        "client_name": "Cliente",
        "covenant_type": "INSS",
        "released_value": valor,
        "commission_percentage": percentual,
        "sale_date": hoje.isoformat(),
        "status": status,
    })


def test_registrar_venda_guarda_fracao(client, env):
    empresa = env.empresa()
    vend = env.usuario("vend@acme.com", role="vendedor", company_id=empresa.id)

    resp = _registrar(client, vend, "10000", percentual="2.5")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["commission_percentage"] == 0.025
    assert data["commission_value"] == 250.0
    assert env.sales.vendas[0].seller_id == vend.id


def test_percentual_acima_de_100_e_rejeitado(client, env):
    empresa = env.empresa()
    vend = env.usuario("vend@acme.com", role="vendedor", company_id=empresa.id)
    resp = _registrar(client, vend, "10000", percentual="150")
    assert resp.status_code == 400


def test_vendedor_ve_so_as_proprias_vendas(client, env):
    empresa = env.empresa()
    admin = env.usuario("admin@acme.com", role="administrador", company_id=empresa.id, full_name="Admin")
    ana = env.usuario("ana@acme.com", role="vendedor", company_id=empresa.id, full_name="Ana")
    bruno = env.usuario("bruno@acme.com", role="vendedor", company_id=empresa.id, full_name="Bruno")
    _registrar(client, ana, "1000")
    _registrar(client, bruno, "3000")

    resumo_ana = client.get("/dashboard/resumo", headers=auth_headers(ana)).json()["data"]
    assert resumo_ana["valor_liberado"] == 1000.0

    resumo_admin = client.get("/dashboard/resumo", headers=auth_headers(admin)).json()["data"]
    assert resumo_admin["valor_liberado"] == 4000.0

    ranking = client.get("/dashboard/ranking", headers=auth_headers(admin)).json()["data"]
    assert [r["nome"] for r in ranking] == ["Bruno", "Ana"]

    projecao = client.get("/dashboard/projecao", headers=auth_headers(admin), params={"meta": 5000})
    assert projecao.status_code == 200
    assert projecao.json()["data"]["meta"] == 5000.0
