"""Reel catalog tests: pools, jackpots and integrity validation."""
import json

import pytest

from shippo_slot.catalog_hash import get_catalog_hash
from shippo_slot.logic.catalog import (
    DEFAULT_CATALOG_DATA,
    CatalogIntegrityError,
    ReelCatalog,
    default_catalog,
    load_catalog,
)
from shippo_slot.logic.models import Item, JackpotCombo, ReelIndexError


def _item(spoken: str) -> Item:
    return Item(spoken_form=spoken, display_form=spoken, meaning=spoken)


class TestDefaultCatalog:
    """The compiled-in subject/object/verb catalog."""

    def test_three_pools_of_five(self, catalog: ReelCatalog):
        for reel in range(3):
            assert len(catalog.items_for(reel)) == 5

    def test_pool_order_is_preserved(self, catalog: ReelCatalog):
        assert [i.spoken_form for i in catalog.items_for(0)] == [
            "わたし", "あなた", "しっぽ", "せんせい", "ねこ",
        ]
        assert catalog.items_for(2)[1].display_form == "勉強する"

    def test_jackpots_in_catalog_order(self, catalog: ReelCatalog):
        meanings = [j.meaning for j in catalog.jackpots()]
        assert meanings == [
            "I eat a meal",
            "Shippo studies Japanese",
            "The cat plays a game",
        ]
        assert all(j.grade == "OATARI" for j in catalog.jackpots())

    def test_items_for_out_of_range_raises(self, catalog: ReelCatalog):
        with pytest.raises(ReelIndexError):
            catalog.items_for(3)

    def test_items_are_immutable(self, catalog: ReelCatalog):
        with pytest.raises(Exception):
            catalog.items_for(0)[0].spoken_form = "x"

    def test_to_dict_round_trips_source_shape(self, catalog: ReelCatalog):
        assert catalog.to_dict() == DEFAULT_CATALOG_DATA


class TestCatalogIntegrity:
    """Catalog faults are reported at construction."""

    def test_combo_with_unknown_form_rejected(self):
        with pytest.raises(CatalogIntegrityError, match="missing from pool 'objects'"):
            ReelCatalog(
                [_item("a")], [_item("b")], [_item("c")],
                [JackpotCombo(combo=("a", "zzz", "c"), meaning="bad")],
            )

    def test_combo_form_in_wrong_position_rejected(self):
        """Each spoken form must exist in the pool at its own position."""
        with pytest.raises(CatalogIntegrityError):
            ReelCatalog(
                [_item("a")], [_item("b")], [_item("c")],
                [JackpotCombo(combo=("b", "a", "c"), meaning="swapped")],
            )

    def test_combo_of_wrong_length_rejected(self):
        with pytest.raises(CatalogIntegrityError, match="expected 3"):
            ReelCatalog(
                [_item("a")], [_item("b")], [_item("c")],
                [JackpotCombo(combo=("a", "b"), meaning="short")],
            )

    def test_empty_pool_rejected(self):
        with pytest.raises(CatalogIntegrityError, match="empty"):
            ReelCatalog([_item("a")], [], [_item("c")], [])

    def test_no_jackpots_is_valid(self):
        catalog = ReelCatalog([_item("a")], [_item("b")], [_item("c")], [])
        assert catalog.jackpots() == ()

    def test_malformed_dict_rejected(self):
        with pytest.raises(CatalogIntegrityError, match="Malformed"):
            ReelCatalog.from_dict({"subjects": [], "objects": []})


class TestLoadCatalog:
    """Loading catalogs from JSON files."""

    def test_none_loads_default(self):
        assert load_catalog(None).to_dict() == default_catalog().to_dict()

    def test_load_from_file(self, tmp_path):
        data = {
            "subjects": [{"text": "いぬ", "kanji": "犬", "meaning": "Dog"}],
            "objects": [{"text": "ほね", "kanji": "骨", "meaning": "bone"}],
            "verbs": [{"text": "かむ", "kanji": "噛む", "meaning": "chew"}],
            "jackpots": [{"combo": ["いぬ", "ほね", "かむ"], "meaning": "The dog chews a bone"}],
        }
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

        catalog = load_catalog(path)
        assert catalog.items_for(0)[0].display_form == "犬"
        # grade defaults to OATARI
        assert catalog.jackpots()[0].grade == "OATARI"

    def test_missing_file_is_integrity_error(self, tmp_path):
        with pytest.raises(CatalogIntegrityError, match="Cannot read"):
            load_catalog(tmp_path / "nope.json")

    def test_non_utf8_file_is_integrity_error(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_bytes(b'{"subjects": ["\xff\xfe"]}')

        with pytest.raises(CatalogIntegrityError, match="Cannot read"):
            load_catalog(path)

    def test_invalid_combo_in_file_rejected(self, tmp_path):
        data = dict(DEFAULT_CATALOG_DATA)
        data["jackpots"] = [{"combo": ["わたし", "ごはん", "のむ"], "meaning": "I drink a meal"}]
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

        with pytest.raises(CatalogIntegrityError, match="のむ"):
            load_catalog(path)


class TestCatalogHash:
    """Catalog hash used for telemetry correlation."""

    def test_hash_is_16_hex_chars(self, catalog: ReelCatalog):
        h = get_catalog_hash(catalog)
        assert len(h) == 16
        assert all(c in "0123456789abcdef" for c in h)

    def test_hash_is_stable(self):
        assert get_catalog_hash(default_catalog()) == get_catalog_hash(default_catalog())

    def test_hash_changes_with_content(self, catalog: ReelCatalog):
        other = ReelCatalog([_item("a")], [_item("b")], [_item("c")], [])
        assert get_catalog_hash(other) != get_catalog_hash(catalog)
