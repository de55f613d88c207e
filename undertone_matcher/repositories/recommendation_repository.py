from __future__ import annotations
import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, Tuple

from ..models.recommendation import ColorSwatch, Recommendation
from ..models.undertone import Undertone

DEFAULT_TABLE_PATH = Path(__file__).with_name("recommendations.json")
_HEX_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


@lru_cache(maxsize=None)
def _load_table(path: Path) -> Tuple[Dict[Undertone, Recommendation], Tuple[str, ...]]:
    """Parse the JSON table once per path; later calls reuse the frozen result."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    table: Dict[Undertone, Recommendation] = {}
    for undertone in Undertone:
        entry = data["undertones"][undertone.value]
        table[undertone] = Recommendation(
            undertone=undertone,
            good=tuple(_swatch(item) for item in entry["good"]),
            avoid=tuple(_swatch(item) for item in entry["avoid"]),
            explanation=entry["explanation"],
        )
    tips = tuple(data.get("tips", []))
    return table, tips


def _swatch(item: dict) -> ColorSwatch:
    if not _HEX_RE.match(item["hex"]):
        raise ValueError(f"Bad hex colour for {item['name']!r}: {item['hex']!r}")
    return ColorSwatch(name=item["name"], hex=item["hex"].upper())


class RecommendationRepository:
    """
    Read-only access to the static palette table (good / avoid / explanation per undertone).
    """
    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else DEFAULT_TABLE_PATH
        self._table, self._tips = _load_table(self.path)

    def retrieve(self, undertone: Undertone) -> Recommendation:
        return self._table[undertone]

    def retrieve_all(self) -> Dict[Undertone, Recommendation]:
        return dict(self._table)

    def retrieve_tips(self) -> Tuple[str, ...]:
        return self._tips
