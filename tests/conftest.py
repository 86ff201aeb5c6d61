"""
==============================================================================
Configuração do pytest e fixtures
==============================================================================

Banco SQLite temporário, loja com relógio fixo e sessão do catálogo.

==============================================================================
"""

import datetime
from pathlib import Path
from typing import Generator

import pytest

from catalogo_eletrico.db import DB
from catalogo_eletrico.session import CatalogSession
from catalogo_eletrico.store import CatalogStore


TODAY = datetime.date(2026, 10, 18)


class FakeClock:
    """Relógio ajustável para os testes de datas."""

    def __init__(self, today: datetime.date = TODAY):
        self.today = today

    def __call__(self) -> datetime.date:
        return self.today

    def advance(self, days: int) -> None:
        self.today = self.today + datetime.timedelta(days=days)


# ============================================================================
# FIXTURES DE BANCO
# ============================================================================

@pytest.fixture
def db(tmp_path: Path) -> Generator[DB, None, None]:
    """Banco novo em arquivo temporário para cada teste."""
    database = DB(tmp_path / "infra_items.db")
    database.init_schema()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(db: DB, clock: FakeClock) -> CatalogStore:
    return CatalogStore(db, today=clock)


@pytest.fixture
def session(store: CatalogStore) -> CatalogSession:
    return CatalogSession(store)


# ============================================================================
# AUXILIARES
# ============================================================================

def set_updated_at(db: DB, item_id: int, day: datetime.date) -> None:
    """Retroage a data de um item direto no SQLite."""
    db._conn.execute("UPDATE infra_item SET updated_at=? WHERE id=?", (day.isoformat(), item_id))
    db.commit()


def write_csv(path: Path, lines, encoding: str = "utf-8") -> Path:
    path.write_text("\n".join(lines) + "\n", encoding=encoding)
    return path
