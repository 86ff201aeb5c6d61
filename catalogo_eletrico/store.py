"""
Finalidade:
    CatalogStore — fonte única da verdade dos itens gravados. Toda alteração
    passa por aqui; a interface nunca acessa o DB diretamente.

Como funciona:
    - Mantém o "conjunto carregado" (self.items): resultado do último
      load_all() ou load_outdated(). A loja não guarda qual dos dois modos
      está ativo; isso é responsabilidade de quem chama (ver session.py).
    - upsert/update/delete validam a entrada, gravam via DB e, em caso de
      sucesso, recarregam todos os itens com load_all(). Se só a releitura
      falhar, o resultado continua OK (os dados já foram gravados) e a
      mensagem avisa que a lista não foi recarregada.
    - Nenhuma operação pública levanta exceção: erros viram Outcome com
      mensagem pronta para exibição, e o conjunto carregado fica intacto.
    - O relógio (today) é injetável para permitir testes determinísticos.

Estilo:
    - Seções numeradas e comentários curtos.
"""

# 1. Importação
import calendar
import datetime
import logging
import sqlite3
from typing import Callable, Iterable, List, Optional

from .db import DB
from .errors import CatalogError, NoChange, NotFound, Outcome, StorageError
from .models import CatalogItem, validate_fields
from .money import prices_equal

logger = logging.getLogger(__name__)

# Itens sem atualização há mais de um mês-calendário são "desatualizados"
OUTDATED_AFTER_MONTHS = 1


# 2. Datas
def months_before(day: datetime.date, months: int = OUTDATED_AFTER_MONTHS) -> datetime.date:
    """Mesmo dia N meses antes; o dia é limitado ao último dia do mês de destino
    (31/03 -> 28/02)."""
    total = day.year * 12 + (day.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return datetime.date(year, month, min(day.day, last_day))


# 3. Classe CatalogStore
class CatalogStore:
    def __init__(self, db: DB, today: Optional[Callable[[], datetime.date]] = None):
        self.db = db
        self._today = today or datetime.date.today
        self.items: List[CatalogItem] = []

    # 3.1 Auxiliares
    def today(self) -> datetime.date:
        return self._today()

    def outdated_cutoff(self) -> datetime.date:
        return months_before(self.today())

    # 3.2 Leitura do conjunto carregado
    def _fetch(self, older_than: Optional[str] = None) -> List[CatalogItem]:
        try:
            return [CatalogItem.from_row(r) for r in self.db.list_items(older_than=older_than)]
        except (sqlite3.Error, ValueError) as ex:
            logger.error("Erro ao carregar itens: %s", ex, exc_info=True)
            raise StorageError(f"Erro ao carregar itens: {ex}") from ex

    def load_all(self) -> List[CatalogItem]:
        """Todos os itens, mais recentes primeiro. Substitui o conjunto carregado.

        :raises StorageError: falha de leitura (o conjunto carregado fica intacto)
        """
        self.items = self._fetch()
        return self.items

    def load_outdated(self) -> List[CatalogItem]:
        """Itens com updated_at anterior a um mês antes de hoje. Substitui o conjunto carregado."""
        cutoff = self.outdated_cutoff().isoformat()
        self.items = self._fetch(older_than=cutoff)
        logger.info("Itens desatualizados (antes de %s): %d", cutoff, len(self.items))
        return self.items

    def get(self, item_id: int) -> Optional[CatalogItem]:
        row = self.db.get_item(item_id)
        return None if row is None else CatalogItem.from_row(row)

    def count(self) -> int:
        return self.db.count_items()

    def _reload_after_write(self, message: str) -> Outcome:
        """Recarrega após uma gravação já confirmada; a falha na leitura não desfaz a gravação."""
        try:
            self.load_all()
        except StorageError as ex:
            return Outcome.success(f"{message} Porém a lista não pôde ser recarregada: {ex.message}")
        return Outcome.success(message)

    # 3.3 Inserção/atualização pela chave natural
    def upsert(self, description: str, brand: str, vendor: str, price: float) -> Outcome:
        try:
            description, brand, vendor, price = validate_fields(description, brand, vendor, price)
            try:
                self.db.upsert_item(description, brand, vendor, price, self.today().isoformat())
            except sqlite3.Error as ex:
                raise StorageError(f"Erro ao inserir: {ex}") from ex
        except CatalogError as ex:
            logger.warning("upsert rejeitado: %s", ex.message)
            return Outcome.from_error(ex)
        logger.info("Item gravado: %s | %s | %s = %.2f", description, brand, vendor, price)
        return self._reload_after_write("Item inserido")

    # 3.4 Atualização por id
    def update(self, item_id: int, description: str, brand: str, vendor: str, price: float) -> Outcome:
        try:
            description, brand, vendor, price = validate_fields(description, brand, vendor, price)
            try:
                current = self.get(item_id)
                if current is None:
                    raise NotFound("Nenhum item foi atualizado.")
                if (current.description == description and current.brand == brand
                        and current.vendor == vendor and prices_equal(current.price, price)):
                    raise NoChange("Nenhuma alteração detectada.")
                affected = self.db.update_item(item_id, description, brand, vendor, price,
                                               self.today().isoformat())
            except sqlite3.Error as ex:
                raise StorageError(f"Erro ao atualizar:\n{ex}") from ex
            if affected != 1:
                raise NotFound("Nenhum item foi atualizado.")
        except CatalogError as ex:
            logger.info("update id=%s: %s", item_id, ex.message)
            return Outcome.from_error(ex)
        logger.info("Item atualizado: id=%s", item_id)
        return self._reload_after_write("Item atualizado.")

    # 3.5 Exclusão por id
    def delete(self, item_id: int) -> Outcome:
        try:
            try:
                affected = self.db.delete_item(item_id)
            except sqlite3.Error as ex:
                raise StorageError(f"Erro ao excluir: {ex}") from ex
            if affected == 0:
                raise NotFound("Nenhum item foi excluído.")
        except CatalogError as ex:
            logger.info("delete id=%s: %s", item_id, ex.message)
            return Outcome.from_error(ex)
        logger.info("Item excluído: id=%s", item_id)
        return self._reload_after_write("Item excluído com sucesso.")

    # 3.6 Gravação em massa (importação CSV)
    def bulk_upsert(self, rows: Iterable[dict]) -> int:
        """Grava todas as linhas numa transação; em falha levanta StorageError
        (nada é confirmado)."""
        try:
            return self.db.upsert_items_bulk(rows)
        except sqlite3.Error as ex:
            raise StorageError(f"Erro ao gravar: {ex}") from ex
