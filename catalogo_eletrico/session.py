"""
Finalidade:
    CatalogSession — superfície de operações consumida pela camada de
    interface (janela, atalhos e diálogos ficam fora deste pacote).

Como funciona:
    - Guarda o modo de visualização (ViewMode.ALL / ViewMode.OUTDATED) e, a
      cada atualização, chama load_all() ou load_outdated() da loja.
    - Mantém a consulta de busca atual e o conjunto visível (SearchIndex).
    - Cada operação devolve um Outcome e o guarda em self.status para
      exibição na barra de status.
    - Gera os textos de exibição de um item: rótulo da lista, texto para a
      área de transferência e valores de pré-preenchimento do formulário.

Estilo:
    - Seções numeradas e comentários curtos.
"""

# 1. Importação
import enum
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from . import csv_transfer
from .errors import CatalogError, ImportSummary, InvalidFormat, Outcome
from .models import CatalogItem
from .money import format_price, format_price_input, parse_price
from .search import SearchIndex
from .store import CatalogStore

logger = logging.getLogger(__name__)


# 2. Modo de visualização
class ViewMode(enum.Enum):
    ALL = "all"
    OUTDATED = "outdated"


# 3. Sessão
class CatalogSession:
    def __init__(self, store: CatalogStore, mode: ViewMode = ViewMode.ALL):
        self.store = store
        self.mode = mode
        self.index = SearchIndex()
        self.query = ""
        self.status: Optional[Outcome] = None
        self.refresh()

    # 3.1 Conjuntos carregado e visível
    @property
    def items(self) -> List[CatalogItem]:
        return self.store.items

    @property
    def visible(self) -> List[CatalogItem]:
        return self.index.search(self.store.items, self.query)

    def refresh(self) -> List[CatalogItem]:
        """Recarrega a loja conforme o modo atual e recalcula o conjunto visível."""
        try:
            if self.mode is ViewMode.OUTDATED:
                self.store.load_outdated()
            else:
                self.store.load_all()
        except CatalogError as ex:
            self.status = Outcome.from_error(ex)
        self.index.invalidate()
        return self.visible

    def set_view_mode(self, mode: ViewMode) -> List[CatalogItem]:
        self.mode = mode
        logger.info("Modo de visualização: %s", mode.value)
        return self.refresh()

    def toggle_outdated(self) -> List[CatalogItem]:
        new_mode = ViewMode.ALL if self.mode is ViewMode.OUTDATED else ViewMode.OUTDATED
        return self.set_view_mode(new_mode)

    def search(self, query: str) -> List[CatalogItem]:
        self.query = query or ""
        return self.visible

    def clear_search(self) -> List[CatalogItem]:
        return self.search("")

    # 3.2 Operações de escrita
    def _finish(self, outcome: Outcome) -> Outcome:
        # a loja recarrega tudo após gravar; reaplica o modo escolhido
        if outcome.ok and self.mode is not ViewMode.ALL:
            self.refresh()
        else:
            self.index.invalidate()
        self.status = outcome
        return outcome

    def upsert(self, description: str, brand: str, vendor: str, price: float) -> Outcome:
        return self._finish(self.store.upsert(description, brand, vendor, price))

    def update(self, item_id: int, description: str, brand: str, vendor: str, price: float) -> Outcome:
        return self._finish(self.store.update(item_id, description, brand, vendor, price))

    def delete(self, item_id: int) -> Outcome:
        return self._finish(self.store.delete(item_id))

    def upsert_text(self, description: str, brand: str, vendor: str, price_text: str) -> Outcome:
        """Como upsert, mas com o preço digitado pelo usuário ("1.234,50")."""
        try:
            price = parse_price(price_text)
        except InvalidFormat as ex:
            self.status = Outcome.from_error(ex)
            return self.status
        return self.upsert(description, brand, vendor, price)

    def update_text(self, item_id: int, description: str, brand: str, vendor: str, price_text: str) -> Outcome:
        try:
            price = parse_price(price_text)
        except InvalidFormat as ex:
            self.status = Outcome.from_error(ex)
            return self.status
        return self.update(item_id, description, brand, vendor, price)

    # 3.3 Transferência CSV
    def import_csv(self, path: Union[Path, str]) -> ImportSummary:
        return self._finish(csv_transfer.import_csv(self.store, path))

    def export_csv(self, path: Union[Path, str]) -> Outcome:
        outcome = csv_transfer.export_csv(self.store, path)
        self.status = outcome
        return outcome

    # 3.4 Textos de exibição
    @staticmethod
    def item_label(item: CatalogItem) -> str:
        brand = f" [{item.brand}]" if item.brand else ""
        return f"[{item.vendor}]{brand} {item.description} R$ {format_price(item.price)} {item.updated_at.isoformat()}"

    @staticmethod
    def clipboard_text(item: CatalogItem) -> str:
        return f"{item.description} {item.brand}\t\t\t\t{item.vendor}\t{format_price(item.price)}"

    @staticmethod
    def edit_values(item: CatalogItem) -> Tuple[str, str, str, str]:
        """Valores para o formulário de edição; o preço vai sem separador de milhar."""
        return (item.description, item.brand, item.vendor, format_price_input(item.price))
