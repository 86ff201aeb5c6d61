"""
Finalidade do arquivo:
    Camada de acesso a dados (SQLite) e esquema da base do Catálogo Elétrico.

Princípio de funcionamento (resumo):
    - Conexão com o SQLite (WAL), dona exclusiva do arquivo durante a vida
      do processo; as demais camadas recebem a instância de DB por parâmetro.
    - Inicialização segura do esquema: CREATE TABLE IF NOT EXISTS; a tabela
      nunca é migrada nem removida por este módulo.
    - Tabela:
        * infra_item — itens do catálogo (description, brand, vendor, price,
          updated_at) com unicidade em (description, brand, vendor).
    - Métodos:
        * leitura (todos / desatualizados / por id);
        * upsert pela chave natural (ON CONFLICT ... DO UPDATE);
        * atualização e exclusão por id;
        * upsert em massa numa única transação (importação CSV).
    - Erros são registrados no log com traceback e propagados; quem converte
      em mensagem para o usuário é a camada CatalogStore.

Estilo:
    - Código dividido em seções numeradas; operações principais com
      comentários curtos.
"""

# 1. Importação das bibliotecas padrão
import sqlite3
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

UPSERT_SQL = """
    INSERT INTO infra_item(description, brand, vendor, price, updated_at)
    VALUES(:description, :brand, :vendor, :price, :updated_at)
    ON CONFLICT(description, brand, vendor) DO UPDATE SET
        price = excluded.price,
        updated_at = excluded.updated_at
"""


# 2. Classe DB — interface principal com a base
class DB:
    """Camada de acesso ao SQLite para a tabela infra_item."""

    # 2.1 Construtor: conexão e configurações básicas
    def __init__(self, db_path: Union[Path, str]):
        self.db_path = db_path if db_path == ":memory:" else Path(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL;")

    # 2.2 Inicialização do esquema
    def init_schema(self):
        self._conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS infra_item(
                id INTEGER PRIMARY KEY,
                description TEXT NOT NULL,
                brand TEXT NOT NULL,
                vendor TEXT NOT NULL,
                price REAL NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE(description, brand, vendor)
            );
            """
        )
        self._conn.commit()
        logger.info("Esquema verificado: %s", self.db_path)

    # 2.3 ------- Leitura -------
    def list_items(self, older_than: Optional[str] = None) -> List[sqlite3.Row]:
        """Itens mais recentes primeiro (id decrescente).

        :param older_than: data ISO; quando informada, só itens com
            updated_at anterior a ela
        """
        sql = "SELECT id, description, brand, vendor, price, updated_at FROM infra_item"
        args: list = []
        if older_than is not None:
            sql += " WHERE updated_at < ?"; args.append(older_than)
        sql += " ORDER BY id DESC"
        cur = self._conn.cursor()
        cur.execute(sql, args)
        return cur.fetchall()

    def get_item(self, item_id: int) -> Optional[sqlite3.Row]:
        cur = self._conn.cursor()
        cur.execute(
            "SELECT id, description, brand, vendor, price, updated_at FROM infra_item WHERE id=?",
            (item_id,),
        )
        return cur.fetchone()

    def count_items(self) -> int:
        cur = self._conn.cursor()
        cur.execute("SELECT COUNT(*) FROM infra_item")
        return int(cur.fetchone()[0])

    # 2.4 ------- Escrita -------
    def upsert_item(self, description: str, brand: str, vendor: str, price: float, updated_at: str) -> None:
        """Insere o item ou, se a chave (description, brand, vendor) já existe,
        sobrescreve apenas price e updated_at. O id da linha existente é mantido."""
        try:
            self._conn.execute(
                UPSERT_SQL,
                {"description": description, "brand": brand, "vendor": vendor,
                 "price": price, "updated_at": updated_at},
            )
            self._conn.commit()
        except Exception as ex:
            self._conn.rollback()
            logger.error("upsert_item: erro ao gravar (%s, %s, %s): %s", description, brand, vendor, ex, exc_info=True)
            raise

    def update_item(self, item_id: int, description: str, brand: str, vendor: str,
                    price: float, updated_at: str) -> int:
        """Sobrescreve os quatro campos e a data. Retorna o número de linhas afetadas."""
        try:
            cur = self._conn.execute(
                "UPDATE infra_item SET description=?, brand=?, vendor=?, price=?, updated_at=? WHERE id=?",
                (description, brand, vendor, price, updated_at, item_id),
            )
            self._conn.commit()
            return cur.rowcount
        except Exception as ex:
            self._conn.rollback()
            logger.error("update_item: erro ao atualizar id=%s: %s", item_id, ex, exc_info=True)
            raise

    def delete_item(self, item_id: int) -> int:
        try:
            cur = self._conn.execute("DELETE FROM infra_item WHERE id=?", (item_id,))
            self._conn.commit()
            return cur.rowcount
        except Exception as ex:
            self._conn.rollback()
            logger.error("delete_item: erro ao excluir id=%s: %s", item_id, ex, exc_info=True)
            raise

    # 2.5 Upsert em massa (uma transação)
    def upsert_items_bulk(self, rows: Iterable[dict]) -> int:
        """
        Upsert em massa numa única transação.

        Chaves esperadas em cada dicionário:
            description, brand, vendor, price, updated_at

        Se qualquer instrução ou o commit falhar, a transação inteira é
        desfeita (rollback) e a exceção é propagada.
        """
        batch = list(rows)
        try:
            self._conn.executemany(UPSERT_SQL, batch)
            self._conn.commit()
        except Exception as ex:
            self._conn.rollback()
            logger.error("upsert_items_bulk: erro na gravação em massa (%d linhas): %s", len(batch), ex, exc_info=True)
            raise
        return len(batch)

    # 2.6 Outros
    def commit(self):
        self._conn.commit()

    def close(self):
        self._conn.close()
