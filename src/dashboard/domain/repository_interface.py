# dashboard/domain/repository_interface.py

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

import pandas as pd

from dashboard.domain.entities import Sale


class SalesRepositoryInterface(ABC):
    @abstractmethod
    def registrar_venda(self, sale: Sale) -> Sale:
        pass

    @abstractmethod
    def carregar_vendas_mes(
        self, company_id: str, ano: int, mes: int, seller_id: Optional[str] = None
    ) -> pd.DataFrame:
        """Vendas do mês com o nome do vendedor (coluna seller_name)."""
        pass

    @abstractmethod
    def listar_vendas(
        self,
        company_id: str,
        seller_id: Optional[str] = None,
        ano: Optional[int] = None,
        mes: Optional[int] = None,
    ) -> List[Sale]:
        """Mais recentes primeiro (sale_date)."""
        pass

    @abstractmethod
    def buscar_venda(self, sale_id: str) -> Optional[Sale]:
        pass

    @abstractmethod
    def atualizar_venda(self, sale: Sale) -> None:
        pass

    @abstractmethod
    def remover_venda(self, sale_id: str) -> None:
        pass

    # 🎯 Metas mensais
    @abstractmethod
    def buscar_meta(self, company_id: str, ano: int, mes: int) -> Optional[Decimal]:
        pass

    @abstractmethod
    def salvar_meta(self, company_id: str, ano: int, mes: int, valor: Decimal) -> None:
        """Insere ou substitui a meta do mês."""
        pass
