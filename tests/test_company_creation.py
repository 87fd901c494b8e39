import pytest

from authentication.domain.entities import AppRole
from fakes import auth_headers


def _payload(**extra):
    payload = {
        "company_name": "Beta Promotora",
        "cnpj": "12.345.678/0001-95",
        "company_email": "contato@beta.com",
        "company_phone": "(11) 99999-0000",
        "plano": "profissional",
        "max_users": 10,
        "admin_email": "chefe@beta.com",
        "admin_password": "senhaforte",
        "admin_name": "Chefe Beta",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def raiz(env):
    return env.usuario("raiz@plataforma.com", role="raiz")


def test_super_admin_cria_empresa_e_admin(client, env, raiz):
    resp = client.post("/create-company", headers=auth_headers(raiz), json=_payload())
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["admin_reutilizado"] is False

    empresa = env.tenant.empresas[data["company_id"]]
    assert empresa.cnpj == "12345678000195"
    assert empresa.phone == "11999990000"
    assert empresa.max_users == 10

    admin = env.identity.buscar_por_email("chefe@beta.com")
    assert env.tenant.roles[admin.id].role == AppRole.ADMINISTRADOR
    assert env.tenant.perfis[admin.id].company_id == empresa.id
    assert "criar_empresa" in env.audit.acoes()


@pytest.mark.parametrize("role", ["administrador", "admin_empresa", "vendedor", "gerente"])
def test_somente_super_admin(client, env, role):
    empresa = env.empresa()
    chamador = env.usuario("x@acme.com", role=role, company_id=empresa.id)
    env.limpar_escritas()

    resp = client.post("/create-company", headers=auth_headers(chamador), json=_payload())
    assert resp.status_code == 403
    assert env.tenant.escritas == []
    assert env.identity.criacoes == 0


def test_cnpj_duplicado(client, env, raiz):
    env.empresa(nome="Acme", cnpj="12345678000195")
    env.limpar_escritas()

    resp = client.post("/create-company", headers=auth_headers(raiz), json=_payload())
    assert resp.status_code == 400
    assert resp.json()["error"] == "CNPJ já cadastrado para a empresa: Acme"
    assert env.tenant.escritas == []
    assert env.identity.criacoes == 0


def test_admin_existente_exige_confirmacao(client, env, raiz):
    outra = env.empresa(nome="Antiga", cnpj="99888777000166")
    existente = env.usuario("chefe@beta.com", role="vendedor", company_id=outra.id)
    env.limpar_escritas()

    resp = client.post("/create-company", headers=auth_headers(raiz), json=_payload())
    assert resp.status_code == 400
    assert "confirmar_migracao_admin" in resp.json()["error"]
    assert env.tenant.escritas == []
    assert env.tenant.roles[existente.id].role == AppRole.VENDEDOR


def test_admin_existente_migrado_com_confirmacao(client, env, raiz):
    outra = env.empresa(nome="Antiga", cnpj="99888777000166")
    existente = env.usuario("chefe@beta.com", role="vendedor", company_id=outra.id)
    env.limpar_escritas()

    resp = client.post(
        "/create-company",
        headers=auth_headers(raiz),
        json=_payload(confirmar_migracao_admin=True),
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["admin_reutilizado"] is True
    assert env.tenant.roles[existente.id].role == AppRole.ADMINISTRADOR
    assert env.tenant.roles[existente.id].company_id == data["company_id"]
    assert env.tenant.perfis[existente.id].company_id == data["company_id"]
    assert env.identity.criacoes == 0


def test_validacao_agregada(client, raiz):
    resp = client.post("/create-company", headers=auth_headers(raiz), json=_payload(
        company_name="B",
        cnpj="123",
        admin_email="nao-email",
        admin_password="curta",
        max_users=0,
    ))
    assert resp.status_code == 400
    erro = resp.json()["error"]
    for campo in ("company_name", "cnpj", "admin_email", "admin_password", "max_users"):
        assert campo in erro


def test_cnpj_com_digitos_insuficientes(client, env, raiz):
    resp = client.post("/create-company", headers=auth_headers(raiz), json=_payload(cnpj="12.345.678/0001-9x"))
    assert resp.status_code == 400
    assert env.tenant.empresas == {}


def test_falha_na_identidade_remove_empresa(client, env, raiz):
    env.identity.falhar_em.add("criar_identidade")

    resp = client.post("/create-company", headers=auth_headers(raiz), json=_payload())
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Erro ao criar administrador")
    assert env.tenant.empresas == {}


def test_falha_no_perfil_desfaz_identidade_e_empresa(client, env, raiz):
    env.tenant.falhar_em.add("criar_perfil")

    resp = client.post("/create-company", headers=auth_headers(raiz), json=_payload())
    assert resp.status_code == 500
    assert env.tenant.empresas == {}
    assert env.identity.buscar_por_email("chefe@beta.com") is None
    assert "criar_empresa" not in env.audit.acoes()


def test_falha_na_migracao_restaura_admin_reaproveitado(client, env, raiz):
    antiga = env.empresa(nome="Antiga", cnpj="99888777000166")
    existente = env.usuario("chefe@beta.com", role="vendedor", company_id=antiga.id)
    env.tenant.falhar_em.add("vincular_empresa_perfil")

    resp = client.post(
        "/create-company",
        headers=auth_headers(raiz),
        json=_payload(confirmar_migracao_admin=True),
    )
    assert resp.status_code == 500
    assert list(env.tenant.empresas) == [antiga.id]

    role = env.tenant.roles[existente.id]
    assert role.role == AppRole.VENDEDOR
    assert role.company_id == antiga.id
    assert env.tenant.perfis[existente.id].company_id == antiga.id
    assert env.identity.buscar_por_id(existente.id) is not None
    assert env.identity.remocoes == []


def test_falha_apos_mover_perfil_devolve_empresa_de_origem(client, env, raiz, monkeypatch):
    antiga = env.empresa(nome="Antiga", cnpj="99888777000166")
    existente = env.usuario("chefe@beta.com", role="gerente", company_id=antiga.id)
    vincular_original = env.tenant.vincular_empresa_perfil

    def vincular_e_falhar(user_id, company_id):
        vincular_original(user_id, company_id)
        if company_id != antiga.id:
            raise RuntimeError("conexão perdida após o UPDATE")

    monkeypatch.setattr(env.tenant, "vincular_empresa_perfil", vincular_e_falhar)

    resp = client.post(
        "/create-company",
        headers=auth_headers(raiz),
        json=_payload(confirmar_migracao_admin=True),
    )
    assert resp.status_code == 500
    assert env.tenant.roles[existente.id].role == AppRole.GERENTE
    assert env.tenant.roles[existente.id].company_id == antiga.id
    assert env.tenant.perfis[existente.id].company_id == antiga.id
