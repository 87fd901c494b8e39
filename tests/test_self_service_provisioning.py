from authentication.domain.entities import AppRole
from fakes import auth_headers


def test_primeiro_acesso_cria_empresa_perfil_e_role(client, env):
    joao = env.usuario("joao@gmail.com", full_name="João Silva", com_perfil=False)

    resp = client.post("/setup-new-user", headers=auth_headers(joao))
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True

    empresa = env.tenant.empresas[body["company_id"]]
    assert empresa.name == "Empresa de João Silva"
    assert empresa.max_users == 2
    assert env.tenant.perfis[joao.id].company_id == empresa.id
    assert env.tenant.roles[joao.id].role == AppRole.VENDEDOR


def test_reexecucao_nao_grava_nada(client, env):
    joao = env.usuario("joao@gmail.com", com_perfil=False)
    client.post("/setup-new-user", headers=auth_headers(joao))
    env.limpar_escritas()

    resp = client.post("/setup-new-user", headers=auth_headers(joao))
    assert resp.json() == {"message": "already_provisioned"}
    assert env.tenant.escritas == []
    assert len(env.tenant.empresas) == 1


def test_nome_cai_para_parte_local_do_email(client, env):
    maria = env.identity.criar_identidade("maria.souza@gmail.com", "hash", None)

    body = client.post("/setup-new-user", headers=auth_headers(maria)).json()
    assert env.tenant.empresas[body["company_id"]].name == "Empresa de maria.souza"


def test_perfil_sem_empresa_recebe_vinculo(client, env):
    joao = env.usuario("joao@gmail.com")  # perfil criado, sem empresa e sem role

    body = client.post("/setup-new-user", headers=auth_headers(joao)).json()
    assert env.tenant.perfis[joao.id].company_id == body["company_id"]
    assert "vincular_empresa_perfil" in env.tenant.escritas


def test_corrida_no_perfil_remove_empresa_recem_criada(client, env):
    joao = env.usuario("joao@gmail.com", com_perfil=False)
    env.tenant.perfil_concorrente = True

    resp = client.post("/setup-new-user", headers=auth_headers(joao))
    assert resp.json() == {"message": "already_provisioned"}
    assert env.tenant.empresas == {}


def test_falha_na_role_desfaz_empresa_e_perfil(client, env):
    joao = env.usuario("joao@gmail.com", com_perfil=False)
    env.tenant.falhar_em.add("inserir_role")

    resp = client.post("/setup-new-user", headers=auth_headers(joao))
    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert env.tenant.empresas == {}
    assert joao.id not in env.tenant.perfis
