"""JSON file persistence for saved supplements."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from supplement_engine.models.supplement import Supplement
from supplement_engine.serialization.json_codec import supplement_from_dict, supplement_to_dict

logger = logging.getLogger(__name__)


class SupplementRepository(Protocol):
    """Where resolved supplements are handed for persistence."""

    def save(self, supplement: Supplement) -> None: ...

    def load_all(self) -> list[Supplement]: ...


class JsonSupplementStore:
    """Stores every supplement of a hotel in a single JSON file.

    Saving a supplement with an existing id replaces it in place.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load_all(self) -> list[Supplement]:
        if not self.path.exists():
            return []
        with open(self.path) as f:
            data = json.load(f)
        return [supplement_from_dict(item) for item in data.get("supplements", [])]

    def get(self, supplement_id: str) -> Supplement | None:
        for supplement in self.load_all():
            if supplement.id == supplement_id:
                return supplement
        return None

    def save(self, supplement: Supplement) -> None:
        supplements = [s for s in self.load_all() if s.id != supplement.id]
        supplements.append(supplement)
        self._write(supplements)
        logger.info("Saved supplement %s (%d value(s)) to %s", supplement.id, len(supplement.values), self.path)

    def clear(self) -> None:
        self._write([])
        logger.info("Cleared all supplements in %s", self.path)

    def _write(self, supplements: list[Supplement]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(
                {"supplements": [supplement_to_dict(s) for s in supplements]},
                f,
                indent=2,
                ensure_ascii=False,
            )
