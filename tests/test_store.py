"""
Testes da CatalogStore: upsert, update, delete e itens desatualizados.
"""

import datetime
import sqlite3

import pytest

from catalogo_eletrico.errors import Status
from catalogo_eletrico.store import CatalogStore, months_before

from .conftest import TODAY, set_updated_at


def _only(store: CatalogStore, description: str):
    found = [it for it in store.load_all() if it.description == description]
    assert len(found) == 1
    return found[0]


class TestUpsert:
    """Inserção ou atualização pela chave (descrição, marca, fornecedor)."""

    def test_insert_creates_one_record(self, store):
        outcome = store.upsert("Cabo 2,5mm", "Sil", "Eletro Sul", 189.9)
        assert outcome.ok
        assert outcome.message == "Item inserido"
        item = _only(store, "Cabo 2,5mm")
        assert item.id is not None
        assert item.brand == "Sil"
        assert item.price == pytest.approx(189.9)
        assert item.updated_at == TODAY

    def test_same_triple_updates_in_place(self, store, clock):
        store.upsert("Disjuntor 20A", "WEG", "ACME Corp", 25.0)
        first = _only(store, "Disjuntor 20A")
        clock.advance(3)

        outcome = store.upsert("Disjuntor 20A", "WEG", "ACME Corp", 27.5)

        assert outcome.ok
        second = _only(store, "Disjuntor 20A")
        assert second.id == first.id
        assert second.price == pytest.approx(27.5)
        assert second.updated_at == TODAY + datetime.timedelta(days=3)
        assert store.count() == 1

    def test_brand_is_part_of_the_key(self, store):
        store.upsert("Tomada 10A", "Tramontina", "Loja A", 12.0)
        store.upsert("Tomada 10A", "", "Loja A", 9.0)
        assert store.count() == 2

    def test_text_fields_are_trimmed(self, store):
        store.upsert("  Fita isolante ", " 3M ", "\tLoja B ", 8.0)
        item = store.items[0]
        assert item.key == ("Fita isolante", "3M", "Loja B")

    @pytest.mark.parametrize("description, vendor", [("", "Loja"), ("Item", ""), ("   ", "Loja")])
    def test_required_fields(self, store, description, vendor):
        outcome = store.upsert(description, "", vendor, 1.0)
        assert outcome.status is Status.VALIDATION_ERROR
        assert store.count() == 0

    def test_negative_price_rejected(self, store):
        outcome = store.upsert("Item", "", "Loja", -1.0)
        assert outcome.status is Status.VALIDATION_ERROR

    def test_storage_failure_keeps_loaded_set(self, store, monkeypatch):
        store.upsert("Item", "", "Loja", 1.0)
        loaded = store.items

        def boom(*args, **kwargs):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(store.db, "upsert_item", boom)
        outcome = store.upsert("Outro", "", "Loja", 2.0)

        assert outcome.status is Status.STORAGE_ERROR
        assert "disk I/O error" in outcome.message
        assert store.items is loaded


class TestLoadOrder:
    def test_most_recent_first(self, store):
        for name in ("A", "B", "C"):
            store.upsert(name, "", "Loja", 1.0)
        assert [it.description for it in store.load_all()] == ["C", "B", "A"]


class TestUpdate:
    """Atualização por id."""

    def test_updates_all_fields(self, store, clock):
        store.upsert("Lâmpada LED", "Philips", "Loja A", 15.0)
        item = store.items[0]
        clock.advance(1)

        outcome = store.update(item.id, "Lâmpada LED 9W", "Philips", "Loja B", 14.0)

        assert outcome.ok
        updated = store.get(item.id)
        assert updated.key == ("Lâmpada LED 9W", "Philips", "Loja B")
        assert updated.price == pytest.approx(14.0)
        assert updated.updated_at == TODAY + datetime.timedelta(days=1)
        assert store.items[0].description == "Lâmpada LED 9W"

    def test_unchanged_fields_are_no_change(self, store, clock):
        store.upsert("Lâmpada LED", "Philips", "Loja A", 15.0)
        item = store.items[0]
        clock.advance(10)

        outcome = store.update(item.id, "Lâmpada LED", "Philips", "Loja A", 15.001)

        assert outcome.status is Status.NO_CHANGE
        assert store.get(item.id).updated_at == TODAY

    def test_missing_id_is_not_found(self, store):
        outcome = store.update(999, "X", "", "Y", 1.0)
        assert outcome.status is Status.NOT_FOUND

    def test_collision_with_other_triple_is_storage_error(self, store):
        store.upsert("A", "", "Loja", 1.0)
        store.upsert("B", "", "Loja", 2.0)
        b = _only(store, "B")

        outcome = store.update(b.id, "A", "", "Loja", 3.0)

        assert outcome.status is Status.STORAGE_ERROR
        assert store.count() == 2


class TestDelete:
    def test_delete_existing(self, store):
        store.upsert("A", "", "Loja", 1.0)
        item = store.items[0]
        outcome = store.delete(item.id)
        assert outcome.ok
        assert store.items == []
        assert store.get(item.id) is None

    def test_delete_missing_is_not_found(self, store):
        store.upsert("A", "", "Loja", 1.0)
        loaded = store.items

        outcome = store.delete(12345)

        assert outcome.status is Status.NOT_FOUND
        assert store.items is loaded
        assert len(store.items) == 1


class TestOutdated:
    """Itens sem atualização há mais de um mês."""

    def test_today_excluded_forty_days_included(self, store, db):
        store.upsert("Novo", "", "Loja", 1.0)
        store.upsert("Velho", "", "Loja", 2.0)
        old = _only(store, "Velho")
        set_updated_at(db, old.id, TODAY - datetime.timedelta(days=40))

        outdated = store.load_outdated()

        assert [it.description for it in outdated] == ["Velho"]
        assert store.items == outdated

    def test_exactly_one_month_is_not_outdated(self, store, db):
        store.upsert("Limite", "", "Loja", 1.0)
        set_updated_at(db, store.items[0].id, datetime.date(2026, 9, 18))
        assert store.load_outdated() == []

    def test_load_all_after_outdated(self, store, db):
        store.upsert("Novo", "", "Loja", 1.0)
        store.load_outdated()
        assert store.items == []
        assert len(store.load_all()) == 1


class TestMonthsBefore:
    @pytest.mark.parametrize("day, expected", [
        (datetime.date(2026, 10, 18), datetime.date(2026, 9, 18)),
        (datetime.date(2026, 3, 31), datetime.date(2026, 2, 28)),
        (datetime.date(2024, 3, 30), datetime.date(2024, 2, 29)),
        (datetime.date(2026, 1, 15), datetime.date(2025, 12, 15)),
    ])
    def test_calendar_month(self, day, expected):
        assert months_before(day) == expected


class TestReloadAfterWrite:
    """Falha só na releitura: a gravação já confirmada não vira erro."""

    def test_upsert_saved_even_if_reload_fails(self, store, monkeypatch):
        def boom(*args, **kwargs):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(store.db, "list_items", boom)
        outcome = store.upsert("Cabo", "", "Loja", 1.0)

        assert outcome.ok
        assert "não pôde ser recarregada" in outcome.message
        assert store.items == []
        assert store.count() == 1

    def test_delete_saved_even_if_reload_fails(self, store, monkeypatch):
        store.upsert("Cabo", "", "Loja", 1.0)
        item_id = store.items[0].id

        def boom(*args, **kwargs):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(store.db, "list_items", boom)
        outcome = store.delete(item_id)

        assert outcome.ok
        assert "não pôde ser recarregada" in outcome.message
        assert store.count() == 0
