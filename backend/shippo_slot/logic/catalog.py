"""Reel catalog: item pools and jackpot combos."""
import json
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from shippo_slot.logic.models import REEL_COUNT, Item, JackpotCombo, ReelIndexError


# Pool keys in reel order
POOL_KEYS = ("subjects", "objects", "verbs")


class CatalogIntegrityError(ValueError):
    """Catalog data is inconsistent. Raised at load time, never mid-round."""


# Compiled-in default data.
# Items use the source field names: text (kana), kanji (display), meaning.
DEFAULT_CATALOG_DATA: dict[str, Any] = {
    "subjects": [
        {"text": "わたし", "kanji": "私", "meaning": "I"},
        {"text": "あなた", "kanji": "貴方", "meaning": "You"},
        {"text": "しっぽ", "kanji": "シッポ", "meaning": "Shippo"},
        {"text": "せんせい", "kanji": "先生", "meaning": "Teacher"},
        {"text": "ねこ", "kanji": "猫", "meaning": "Cat"},
    ],
    "objects": [
        {"text": "ごはん", "kanji": "ご飯", "meaning": "meal"},
        {"text": "にほんご", "kanji": "日本語", "meaning": "Japanese"},
        {"text": "げーむ", "kanji": "ゲーム", "meaning": "game"},
        {"text": "おんがく", "kanji": "音楽", "meaning": "music"},
        {"text": "しゅくだい", "kanji": "宿題", "meaning": "homework"},
    ],
    "verbs": [
        {"text": "たべる", "kanji": "食べる", "meaning": "eat"},
        {"text": "べんきょうする", "kanji": "勉強する", "meaning": "study"},
        {"text": "あそぶ", "kanji": "遊ぶ", "meaning": "play"},
        {"text": "きく", "kanji": "聞く", "meaning": "listen"},
        {"text": "わすれる", "kanji": "忘れる", "meaning": "forget"},
    ],
    "jackpots": [
        {"combo": ["わたし", "ごはん", "たべる"], "meaning": "I eat a meal", "grade": "OATARI"},
        {"combo": ["しっぽ", "にほんご", "べんきょうする"], "meaning": "Shippo studies Japanese", "grade": "OATARI"},
        {"combo": ["ねこ", "げーむ", "あそぶ"], "meaning": "The cat plays a game", "grade": "OATARI"},
    ],
}


class ReelCatalog:
    """
    Read-only provider of reel pools and jackpot combos.

    Validated on construction: every pool is non-empty, every combo has one
    spoken form per reel, and each of those exists in the pool at that
    position. Jackpot order is preserved; the first match wins.
    """

    def __init__(
        self,
        subjects: Sequence[Item],
        objects: Sequence[Item],
        verbs: Sequence[Item],
        jackpots: Sequence[JackpotCombo],
    ):
        self._pools: tuple[tuple[Item, ...], ...] = (
            tuple(subjects),
            tuple(objects),
            tuple(verbs),
        )
        self._jackpots: tuple[JackpotCombo, ...] = tuple(jackpots)
        self._validate()

    def _validate(self) -> None:
        for key, pool in zip(POOL_KEYS, self._pools):
            if not pool:
                raise CatalogIntegrityError(f"Pool '{key}' is empty")

        spoken = [{item.spoken_form for item in pool} for pool in self._pools]
        for n, jackpot in enumerate(self._jackpots):
            if len(jackpot.combo) != REEL_COUNT:
                raise CatalogIntegrityError(
                    f"Jackpot #{n} has {len(jackpot.combo)} entries, expected {REEL_COUNT}"
                )
            for position, form in enumerate(jackpot.combo):
                if form not in spoken[position]:
                    raise CatalogIntegrityError(
                        f"Jackpot #{n} ({jackpot.meaning!r}) references "
                        f"'{form}' missing from pool '{POOL_KEYS[position]}'"
                    )

    def items_for(self, reel_index: int) -> tuple[Item, ...]:
        """Ordered item pool of a reel."""
        if not 0 <= reel_index < REEL_COUNT:
            raise ReelIndexError(reel_index)
        return self._pools[reel_index]

    def jackpots(self) -> tuple[JackpotCombo, ...]:
        """Jackpot combos in catalog order."""
        return self._jackpots

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the source JSON shape."""
        data: dict[str, Any] = {
            key: [
                {"text": item.spoken_form, "kanji": item.display_form, "meaning": item.meaning}
                for item in pool
            ]
            for key, pool in zip(POOL_KEYS, self._pools)
        }
        data["jackpots"] = [
            {"combo": list(j.combo), "meaning": j.meaning, "grade": j.grade}
            for j in self._jackpots
        ]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReelCatalog":
        """Build a catalog from the source JSON shape."""
        try:
            pools = [
                [
                    Item(
                        spoken_form=raw["text"],
                        display_form=raw.get("kanji", raw["text"]),
                        meaning=raw.get("meaning", ""),
                    )
                    for raw in data[key]
                ]
                for key in POOL_KEYS
            ]
            jackpots = [JackpotCombo(**raw) for raw in data.get("jackpots", [])]
        except (KeyError, TypeError, ValidationError) as e:
            raise CatalogIntegrityError(f"Malformed catalog data: {e}") from e
        return cls(*pools, jackpots=jackpots)


def default_catalog() -> ReelCatalog:
    """The compiled-in subject/object/verb catalog."""
    return ReelCatalog.from_dict(DEFAULT_CATALOG_DATA)


def load_catalog(path: str | Path | None = None) -> ReelCatalog:
    """Load a catalog from a JSON file, or the default when path is None."""
    if path is None:
        return default_catalog()
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CatalogIntegrityError(f"Cannot read catalog {path}: {e}") from e
    return ReelCatalog.from_dict(data)
