# proposals/domain/facta_payload.py

from datetime import date
from decimal import Decimal

from proposals.domain.entities import Client, Modality, Proposal

TIPO_OPERACAO_FACTA = {
    Modality.MARGEM_LIVRE.value: "MARGEM",
    Modality.FGTS_ANTECIPACAO.value: "FGTS",
    Modality.PORTABILIDADE.value: "PORTABILIDADE",
    Modality.PORT_REFINANCIAMENTO.value: "PORT_REFIN",
    Modality.CARTAO_CONSIGNADO.value: "CARTAO_RMC",
    Modality.CREDITO_TRABALHADOR.value: "CREDITO_TRABALHADOR",
}

# Modalidades sem convênio no contrato da Facta
SEM_CONVENIO = {Modality.FGTS_ANTECIPACAO.value, Modality.CREDITO_TRABALHADOR.value}


def tipo_operacao(modality: str) -> str:
    return TIPO_OPERACAO_FACTA.get(modality, modality.upper())


def _numero(valor):
    if isinstance(valor, Decimal):
        return float(valor)
    return valor


def _data(valor):
    if isinstance(valor, date):
        return valor.isoformat()
    return valor


def montar_payload_facta(proposal: Proposal, client: Client) -> dict:
    """
    Monta o corpo de POST /v2/propostas. Função pura: não acessa banco nem rede.
    """
    modality = proposal.modality.value if isinstance(proposal.modality, Modality) else str(proposal.modality)

    payload = {
        "cpf": client.cpf,
        "nome": client.full_name,
        "data_nascimento": _data(client.birth_date),
        "telefone": client.phone,
        "valor_solicitado": _numero(proposal.requested_value),
        "prazo": proposal.term_months,
        "taxa": _numero(proposal.interest_rate),
        "tipo_operacao": tipo_operacao(modality),
    }

    if modality not in SEM_CONVENIO:
        payload["convenio"] = proposal.covenant

    # Dados bancários só quando informados
    opcionais = {
        "agencia": proposal.bank_agency,
        "conta": proposal.bank_account,
        "tipo_conta": proposal.bank_account_type,
        "chave_pix": proposal.pix_key,
    }
    payload.update({chave: valor for chave, valor in opcionais.items() if valor})

    return payload
