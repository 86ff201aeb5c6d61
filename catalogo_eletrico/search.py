"""
Finalidade:
    Índice de busca em memória: filtra o conjunto carregado pela consulta de
    texto livre e produz o "conjunto visível".

Como funciona:
    - Consulta vazia: o conjunto visível é o próprio conjunto carregado, na
      mesma ordem. O texto da consulta é usado como digitado (sem aparar
      espaços), então " " filtra os itens que contêm espaço.
    - Consulta não vazia: busca por substring sem diferenciar maiúsculas
      (casefold) em descrição, marca ou fornecedor; basta um campo coincidir.
      A ordem relativa do conjunto carregado é preservada.
    - O recálculo só acontece quando o texto da consulta muda ou quando o
      conjunto carregado é outro (invalidate() força o recálculo após
      recarregar a loja).

Estilo:
    - Seções numeradas e comentários curtos.
"""

# 1. Importação
import logging
from typing import Any, List, Optional, Sequence

from .models import CatalogItem

logger = logging.getLogger(__name__)


# 2. Chave de busca
def search_key(value: Any) -> str:
    if not value:
        return ""
    return str(value).casefold()


def matches(item: CatalogItem, needle: str) -> bool:
    """needle já deve estar em casefold."""
    return (needle in search_key(item.description)
            or needle in search_key(item.brand)
            or needle in search_key(item.vendor))


# 3. Índice
class SearchIndex:
    def __init__(self):
        self.last_query: Optional[str] = None
        self._source: Optional[Sequence[CatalogItem]] = None
        self.visible: List[CatalogItem] = []
        self.recomputations = 0

    def invalidate(self) -> None:
        self.last_query = None
        self._source = None

    def search(self, items: Sequence[CatalogItem], query: str) -> List[CatalogItem]:
        """Retorna o conjunto visível para a consulta.

        :param items: conjunto carregado da loja
        :param query: texto livre digitado pelo usuário
        :return: lista filtrada (nova lista; o conjunto carregado não é alterado)
        """
        query = query or ""
        if query == self.last_query and items is self._source:
            return self.visible
        self.last_query = query
        self._source = items
        self.recomputations += 1
        needle = query.casefold()
        if not needle:
            self.visible = list(items)
        else:
            self.visible = [it for it in items if matches(it, needle)]
            logger.info("Busca '%s' filtrou %d de %d itens", query, len(self.visible), len(items))
        return self.visible
