# authentication/manage_users.py

import argparse
import sys

from audit.infrastructure.audit_repository import AuditRepository
from authentication.domain.entities import AppRole
from authentication.infrastructure.database_connection import conectar_banco, fechar_conexao
from authentication.infrastructure.identity_repository import IdentityRepository
from authentication.utils.password_utils import gerar_hash_senha, validar_senha
from crm_api.schema import aplicar_schema
from provisioning.application.company_creation_service import CompanyCreationService, DadosNovaEmpresa
from provisioning.domain.entities import Plano, Profile, RoleAssignment
from provisioning.infrastructure.tenant_repository import TenantRepository
from utils.errors import AppError

SOLICITANTE_CLI = "cli"


def inicializar_banco():
    conn = conectar_banco()
    try:
        aplicar_schema(conn)
        print("✅ Tabelas criadas/atualizadas com sucesso.")
    finally:
        fechar_conexao(conn)


def criar_super_admin(email, senha, nome, role=AppRole.RAIZ):
    validar_senha(senha, minimo=8)
    conn = conectar_banco()
    try:
        identidade = IdentityRepository(conn).criar_identidade(
            email=email,
            senha_hash=gerar_hash_senha(senha),
            full_name=nome,
            email_confirmado=True,
        )
        tenants = TenantRepository(conn)
        tenants.upsert_role(RoleAssignment(user_id=identidade.id, role=role, company_id=None))
        tenants.criar_perfil(Profile(user_id=identidade.id, email=identidade.email, full_name=nome))
        print(f"✅ Super admin {nome} ({role.value}) criado com sucesso. ID={identidade.id}")
        return identidade.id
    finally:
        fechar_conexao(conn)


def criar_empresa(dados: DadosNovaEmpresa):
    conn = conectar_banco()
    try:
        service = CompanyCreationService(TenantRepository(conn), IdentityRepository(conn), AuditRepository(conn))
        resultado = service.executar_criacao(SOLICITANTE_CLI, dados)
        data = resultado["data"]
        print(f"✅ Empresa {data['company_name']} criada com sucesso. ID={data['company_id']}")
        print(f"   Administrador: {data['admin_email']} (reutilizado: {data['admin_reutilizado']})")
        return data["company_id"]
    finally:
        fechar_conexao(conn)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Gerenciamento de empresas e usuários do CRM Consignado")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init-db", help="Criar as tabelas do banco")

    # Super admin
    admin_parser = subparsers.add_parser("create-super-admin", help="Criar super admin da plataforma")
    admin_parser.add_argument("--email", required=True, help="Email do super admin")
    admin_parser.add_argument("--senha", required=True, help="Senha (mínimo 8 caracteres)")
    admin_parser.add_argument("--nome", required=True, help="Nome completo")
    admin_parser.add_argument("--role", default="raiz", choices=["raiz", "admin_global"], help="Papel")

    # Empresa
    company_parser = subparsers.add_parser("create-company", help="Criar empresa com administrador")
    company_parser.add_argument("--nome", required=True, help="Nome da empresa")
    company_parser.add_argument("--cnpj", required=True, help="CNPJ da empresa")
    company_parser.add_argument("--plano", default="basico", choices=[p.value for p in Plano], help="Plano")
    company_parser.add_argument("--max-users", type=int, default=2, help="Limite de usuários ativos")
    company_parser.add_argument("--admin-email", required=True, help="Email do administrador")
    company_parser.add_argument("--admin-senha", required=True, help="Senha do administrador")
    company_parser.add_argument("--admin-nome", required=True, help="Nome do administrador")
    company_parser.add_argument(
        "--migrar-admin",
        action="store_true",
        help="Reaproveita o email de administrador já cadastrado, movendo-o para a nova empresa",
    )

    args = parser.parse_args(argv)

    try:
        if args.command == "init-db":
            inicializar_banco()

        elif args.command == "create-super-admin":
            criar_super_admin(args.email, args.senha, args.nome, AppRole(args.role))

        elif args.command == "create-company":
            criar_empresa(DadosNovaEmpresa(
                company_name=args.nome,
                cnpj=args.cnpj,
                admin_email=args.admin_email,
                admin_password=args.admin_senha,
                admin_name=args.admin_nome,
                plano=Plano(args.plano),
                max_users=args.max_users,
                confirmar_migracao_admin=args.migrar_admin,
            ))

        else:
            parser.print_help()
            return 1
    except AppError as e:
        print(f"❌ {e.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
