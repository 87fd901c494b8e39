# tests/fakes.py
# 🔹 Repositórios em memória usados via app.dependency_overrides

import re
import uuid
from copy import deepcopy

import httpx
import pandas as pd

from audit.domain.repository_interface import AuditRepositoryInterface
from authentication.domain.entities import Identidade
from authentication.domain.repository_interface import IdentityRepositoryInterface
from authentication.infrastructure.token_service import gerar_token
from dashboard.domain.entities import COLUNAS_VENDAS
from dashboard.domain.repository_interface import SalesRepositoryInterface
from proposals.domain.repository_interface import ProposalRepositoryInterface
from provisioning.domain.repository_interface import TenantRepositoryInterface
from registry.domain.repository_interface import RegistryRepositoryInterface
from utils.errors import CpfJaCadastradoError, IdentidadeJaExisteError


class FalhaSimulada(RuntimeError):
    pass


class _Falhavel:
    """Permite simular falha de banco em métodos específicos."""

    def __init__(self):
        self.falhar_em = set()

    def _checar(self, metodo: str):
        if metodo in self.falhar_em:
            raise FalhaSimulada(f"falha simulada em {metodo}")


class FakeIdentityRepository(_Falhavel, IdentityRepositoryInterface):
    def __init__(self):
        super().__init__()
        self.identidades = {}
        self.criacoes = 0
        self.remocoes = []

    def criar_identidade(self, email, senha_hash, full_name, email_confirmado=True):
        self._checar("criar_identidade")
        email = email.strip().lower()
        if self.buscar_por_email(email):
            raise IdentidadeJaExisteError(email)
        identidade = Identidade(
            id=str(uuid.uuid4()),
            email=email,
            senha_hash=senha_hash,
            full_name=full_name,
            email_confirmado=email_confirmado,
        )
        self.identidades[identidade.id] = identidade
        self.criacoes += 1
        return identidade

    def buscar_por_id(self, user_id):
        return self.identidades.get(user_id)

    def buscar_por_email(self, email):
        email = email.strip().lower()
        return next((i for i in self.identidades.values() if i.email == email), None)

    def atualizar_senha(self, user_id, senha_hash):
        self.identidades[user_id].senha_hash = senha_hash

    def remover_identidade(self, user_id):
        self._checar("remover_identidade")
        self.identidades.pop(user_id, None)
        self.remocoes.append(user_id)


class FakeTenantRepository(_Falhavel, TenantRepositoryInterface):
    def __init__(self):
        super().__init__()
        self.empresas = {}
        self.perfis = {}
        self.roles = {}
        self.escritas = []
        # Simula outra requisição que criou o perfil entre a leitura e o INSERT
        self.perfil_concorrente = False

    def _escrever(self, metodo: str):
        self._checar(metodo)
        self.escritas.append(metodo)

    # 🏢 Empresas
    def buscar_empresa(self, company_id):
        return deepcopy(self.empresas.get(company_id))

    def buscar_empresa_por_cnpj(self, cnpj):
        return next((deepcopy(e) for e in self.empresas.values() if e.cnpj == cnpj), None)

    def criar_empresa(self, company):
        self._escrever("criar_empresa")
        company.id = company.id or str(uuid.uuid4())
        self.empresas[company.id] = deepcopy(company)
        return company

    def remover_empresa(self, company_id):
        self._escrever("remover_empresa")
        self.empresas.pop(company_id, None)

    # 👤 Perfis
    def buscar_perfil(self, user_id):
        return deepcopy(self.perfis.get(user_id))

    def criar_perfil(self, profile):
        self._escrever("criar_perfil")
        if self.perfil_concorrente or profile.user_id in self.perfis:
            return False
        profile.id = profile.id or str(uuid.uuid4())
        self.perfis[profile.user_id] = deepcopy(profile)
        return True

    def vincular_empresa_perfil(self, user_id, company_id):
        self._escrever("vincular_empresa_perfil")
        self.perfis[user_id].company_id = company_id

    def definir_perfil_ativo(self, user_id, ativo):
        self._escrever("definir_perfil_ativo")
        self.perfis[user_id].is_active = ativo

    def remover_perfil(self, user_id):
        self._escrever("remover_perfil")
        self.perfis.pop(user_id, None)

    def contar_perfis_ativos(self, company_id):
        return sum(1 for p in self.perfis.values() if p.company_id == company_id and p.is_active)

    def listar_perfis(self, company_id):
        return [deepcopy(p) for p in self.perfis.values() if p.company_id == company_id]

    # 🔑 Roles
    def buscar_role(self, user_id):
        return deepcopy(self.roles.get(user_id))

    def inserir_role(self, assignment):
        self._escrever("inserir_role")
        self.roles[assignment.user_id] = deepcopy(assignment)

    def upsert_role(self, assignment):
        self._escrever("upsert_role")
        self.roles[assignment.user_id] = deepcopy(assignment)

    def remover_role(self, user_id):
        self._escrever("remover_role")
        self.roles.pop(user_id, None)


class FakeAuditRepository(AuditRepositoryInterface):
    def __init__(self):
        self.auditoria = []
        self.integracoes = []

    def registrar_auditoria(self, entry):
        self.auditoria.append(entry)

    def registrar_integracao(self, log):
        self.integracoes.append(log)

    def acoes(self):
        return [e.action for e in self.auditoria]


class FakeProposalRepository(ProposalRepositoryInterface):
    def __init__(self):
        self.propostas = {}
        self.clientes = {}
        self.bancos = {}

    def buscar_proposta(self, proposal_id):
        return deepcopy(self.propostas.get(proposal_id))

    def buscar_cliente(self, client_id):
        return deepcopy(self.clientes.get(client_id))

    def buscar_banco(self, bank_id):
        return deepcopy(self.bancos.get(bank_id))

    def salvar_resultado_envio(self, proposal):
        self.propostas[proposal.id] = deepcopy(proposal)

    def atualizar_status_banco(self, proposal_id, bank_status, resposta_banco):
        proposta = self.propostas[proposal_id]
        proposta.bank_status = bank_status
        proposta.resposta_banco = resposta_banco

    def criar_proposta(self, proposal):
        proposal.id = proposal.id or str(uuid.uuid4())
        self.propostas[proposal.id] = deepcopy(proposal)
        return proposal

    def listar_propostas(self, company_id, seller_id=None, internal_status=None, bank_status=None):
        propostas = [
            p for p in self.propostas.values()
            if p.company_id == company_id
            and (not seller_id or p.seller_id == seller_id)
            and (not internal_status or p.internal_status == internal_status)
            and (not bank_status or p.bank_status == bank_status)
        ]
        return deepcopy(sorted(propostas, key=lambda p: p.created_at, reverse=True))


class FakeRegistryRepository(RegistryRepositoryInterface):
    """Compartilha clientes e bancos com o FakeProposalRepository, como as tabelas reais."""

    def __init__(self, proposals: FakeProposalRepository):
        self.proposals = proposals

    @property
    def clientes(self):
        return self.proposals.clientes

    @property
    def bancos(self):
        return self.proposals.bancos

    # 👥 Clientes
    def buscar_cliente(self, client_id):
        return deepcopy(self.clientes.get(client_id))

    def buscar_cliente_por_cpf(self, company_id, cpf):
        return next(
            (deepcopy(c) for c in self.clientes.values() if c.company_id == company_id and c.cpf == cpf),
            None,
        )

    def listar_clientes(self, company_id, busca=None):
        clientes = [c for c in self.clientes.values() if c.company_id == company_id]
        if busca:
            digitos = re.sub(r"\D", "", busca)
            if digitos:
                clientes = [c for c in clientes if c.cpf == digitos]
            else:
                clientes = [c for c in clientes if busca.strip().lower() in c.full_name.lower()]
        return deepcopy(sorted(clientes, key=lambda c: c.full_name))

    def criar_cliente(self, client):
        if self.buscar_cliente_por_cpf(client.company_id, client.cpf):
            raise CpfJaCadastradoError(client.cpf)
        client.id = client.id or str(uuid.uuid4())
        self.clientes[client.id] = deepcopy(client)
        return client

    def atualizar_cliente(self, client):
        self.clientes[client.id] = deepcopy(client)

    def remover_cliente(self, client_id):
        self.clientes.pop(client_id, None)

    def cliente_possui_propostas(self, client_id):
        return any(p.client_id == client_id for p in self.proposals.propostas.values())

    # 🏦 Bancos
    def buscar_banco(self, bank_id):
        return deepcopy(self.bancos.get(bank_id))

    def listar_bancos(self, company_id, somente_ativos=False):
        bancos = [
            b for b in self.bancos.values()
            if b.company_id == company_id and (b.is_active or not somente_ativos)
        ]
        return deepcopy(sorted(bancos, key=lambda b: b.name))

    def criar_banco(self, bank):
        bank.id = bank.id or str(uuid.uuid4())
        self.bancos[bank.id] = deepcopy(bank)
        return bank

    def atualizar_banco(self, bank):
        self.bancos[bank.id] = deepcopy(bank)

    def remover_banco(self, bank_id):
        self.bancos.pop(bank_id, None)

    def banco_possui_propostas(self, bank_id):
        return any(p.bank_id == bank_id for p in self.proposals.propostas.values())


class FakeSalesRepository(SalesRepositoryInterface):
    def __init__(self, tenant_repo: FakeTenantRepository):
        self.tenant_repo = tenant_repo
        self.vendas = []
        self.metas = {}

    def registrar_venda(self, sale):
        sale.id = sale.id or str(uuid.uuid4())
        self.vendas.append(deepcopy(sale))
        return sale

    def carregar_vendas_mes(self, company_id, ano, mes, seller_id=None):
        linhas = []
        for venda in self.vendas:
            if venda.company_id != company_id:
                continue
            if (venda.sale_date.year, venda.sale_date.month) != (ano, mes):
                continue
            if seller_id and venda.seller_id != seller_id:
                continue
            perfil = self.tenant_repo.perfis.get(venda.seller_id)
            linhas.append({
                "id": venda.id,
                "seller_id": venda.seller_id,
                "seller_name": perfil.full_name if perfil else None,
                "released_value": venda.released_value,
                "commission_value": venda.commission_value,
                "sale_date": venda.sale_date,
                "status": venda.status.value,
            })
        return pd.DataFrame(linhas, columns=COLUNAS_VENDAS)

    def listar_vendas(self, company_id, seller_id=None, ano=None, mes=None):
        vendas = [
            v for v in self.vendas
            if v.company_id == company_id
            and (not seller_id or v.seller_id == seller_id)
            and (not (ano and mes) or (v.sale_date.year, v.sale_date.month) == (ano, mes))
        ]
        return deepcopy(sorted(vendas, key=lambda v: v.sale_date, reverse=True))

    def buscar_venda(self, sale_id):
        return next((deepcopy(v) for v in self.vendas if v.id == sale_id), None)

    def atualizar_venda(self, sale):
        self.vendas = [deepcopy(sale) if v.id == sale.id else v for v in self.vendas]

    def remover_venda(self, sale_id):
        self.vendas = [v for v in self.vendas if v.id != sale_id]

    def buscar_meta(self, company_id, ano, mes):
        return self.metas.get((company_id, ano, mes))

    def salvar_meta(self, company_id, ano, mes, valor):
        self.metas[(company_id, ano, mes)] = valor


class FakeFacta:
    """Lado servidor do httpx.MockTransport: grava requisições e devolve respostas roteirizadas."""

    def __init__(self):
        self.requisicoes = []
        self.status_code = 200
        self.corpo = {"protocolo": "FAC-123"}
        self.erro_transporte = None

    def responder(self, request):
        self.requisicoes.append(request)
        if self.erro_transporte:
            raise self.erro_transporte
        return httpx.Response(self.status_code, json=self.corpo)


def auth_headers(identidade):
    return {"Authorization": f"Bearer {gerar_token(identidade.id, identidade.email)}"}
