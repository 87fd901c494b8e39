# crm_api/schema.py

from utils.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("database")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS auth_users (
    id UUID PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    senha_hash TEXT NOT NULL,
    full_name TEXT,
    email_confirmado BOOLEAN NOT NULL DEFAULT TRUE,
    criado_em TIMESTAMP NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS companies (
    id UUID PRIMARY KEY,
    name TEXT NOT NULL,
    cnpj VARCHAR(14) UNIQUE,
    email TEXT,
    phone TEXT,
    responsavel TEXT,
    status TEXT NOT NULL DEFAULT 'active'
        CHECK (status IN ('active', 'suspended', 'canceled')),
    plano TEXT NOT NULL DEFAULT 'basico'
        CHECK (plano IN ('basico', 'profissional', 'enterprise')),
    max_users INTEGER NOT NULL DEFAULT 2,
    created_at TIMESTAMP NOT NULL DEFAULT NOW()
);

-- user_id sem FK: o perfil sobrevive à remoção da identidade (soft delete)
CREATE TABLE IF NOT EXISTS profiles (
    id UUID PRIMARY KEY,
    user_id UUID NOT NULL UNIQUE,
    company_id UUID REFERENCES companies(id) ON DELETE SET NULL,
    email TEXT,
    full_name TEXT,
    phone TEXT,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMP NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMP NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS user_roles (
    user_id UUID PRIMARY KEY,
    role TEXT NOT NULL,
    company_id UUID REFERENCES companies(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS clients (
    id UUID PRIMARY KEY,
    company_id UUID NOT NULL REFERENCES companies(id),
    cpf VARCHAR(11) NOT NULL,
    full_name TEXT NOT NULL,
    birth_date DATE,
    phone TEXT,
    email TEXT,
    gender TEXT,
    address_city TEXT,
    address_state VARCHAR(2),
    internal_notes TEXT,
    created_by UUID,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMP NOT NULL DEFAULT NOW(),
    UNIQUE (company_id, cpf)
);

CREATE TABLE IF NOT EXISTS banks (
    id UUID PRIMARY KEY,
    company_id UUID REFERENCES companies(id),
    name TEXT NOT NULL,
    code TEXT,
    possui_api BOOLEAN NOT NULL DEFAULT FALSE,
    base_url TEXT,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    priority INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS proposals (
    id UUID PRIMARY KEY,
    company_id UUID NOT NULL REFERENCES companies(id),
    client_id UUID NOT NULL REFERENCES clients(id),
    seller_id UUID,
    bank_id UUID REFERENCES banks(id),
    modality TEXT NOT NULL,
    requested_value NUMERIC(14, 2),
    term_months INTEGER,
    interest_rate NUMERIC(8, 4),
    covenant TEXT,
    bank_agency TEXT,
    bank_account TEXT,
    bank_account_type TEXT,
    pix_key TEXT,
    internal_status TEXT NOT NULL DEFAULT 'rascunho',
    bank_status TEXT NOT NULL DEFAULT 'nao_enviado',
    protocolo_banco TEXT,
    payload_enviado JSONB,
    resposta_banco JSONB,
    erro_banco TEXT,
    observations TEXT,
    created_at TIMESTAMP NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMP NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS sales (
    id UUID PRIMARY KEY,
    company_id UUID NOT NULL REFERENCES companies(id),
    seller_id UUID NOT NULL,
    client_name TEXT NOT NULL,
    covenant_type TEXT NOT NULL,
    released_value NUMERIC(14, 2) NOT NULL,
    commission_percentage NUMERIC(6, 4) NOT NULL,
    commission_value NUMERIC(14, 2) NOT NULL,
    sale_date DATE NOT NULL,
    status TEXT NOT NULL DEFAULT 'em_andamento'
        CHECK (status IN ('em_andamento', 'pago', 'cancelado')),
    observations TEXT,
    created_at TIMESTAMP NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_sales_company_date ON sales (company_id, sale_date);

CREATE TABLE IF NOT EXISTS monthly_goals (
    id UUID PRIMARY KEY,
    company_id UUID NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
    year INTEGER NOT NULL,
    month INTEGER NOT NULL CHECK (month BETWEEN 1 AND 12),
    target_value NUMERIC(14, 2) NOT NULL CHECK (target_value > 0),
    created_at TIMESTAMP NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMP NOT NULL DEFAULT NOW(),
    UNIQUE (company_id, year, month)
);

CREATE TABLE IF NOT EXISTS audit_logs (
    id BIGSERIAL PRIMARY KEY,
    user_id TEXT NOT NULL,
    company_id UUID,
    action TEXT NOT NULL,
    resource TEXT NOT NULL,
    resource_id TEXT,
    old_data JSONB,
    new_data JSONB,
    created_at TIMESTAMP NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS integration_logs (
    id BIGSERIAL PRIMARY KEY,
    company_id UUID,
    provider TEXT NOT NULL,
    operation TEXT NOT NULL,
    status_code INTEGER,
    request_data JSONB,
    response_data JSONB,
    error_message TEXT,
    duration_ms INTEGER,
    created_at TIMESTAMP NOT NULL DEFAULT NOW()
);

-- Instalações existentes: colunas incluídas com os cadastros de clientes e bancos
ALTER TABLE clients ADD COLUMN IF NOT EXISTS gender TEXT;
ALTER TABLE clients ADD COLUMN IF NOT EXISTS address_city TEXT;
ALTER TABLE clients ADD COLUMN IF NOT EXISTS address_state VARCHAR(2);
ALTER TABLE clients ADD COLUMN IF NOT EXISTS internal_notes TEXT;
ALTER TABLE clients ADD COLUMN IF NOT EXISTS created_by UUID;
ALTER TABLE clients ADD COLUMN IF NOT EXISTS is_active BOOLEAN NOT NULL DEFAULT TRUE;
ALTER TABLE banks ADD COLUMN IF NOT EXISTS is_active BOOLEAN NOT NULL DEFAULT TRUE;
ALTER TABLE banks ADD COLUMN IF NOT EXISTS priority INTEGER NOT NULL DEFAULT 0;
ALTER TABLE banks ADD COLUMN IF NOT EXISTS created_at TIMESTAMP NOT NULL DEFAULT NOW();
ALTER TABLE proposals ADD COLUMN IF NOT EXISTS observations TEXT;
"""


def aplicar_schema(conn) -> None:
    with conn.cursor() as cur:
        cur.execute(SCHEMA_SQL)
    conn.commit()
    logger.info("🗄️ Schema aplicado com sucesso")
