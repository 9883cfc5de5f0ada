from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Iterable, Tuple

from loguru import logger

from gymovoo.config import CATALOG_PATH
from gymovoo.models.schemas import Category, Exercise, ExperienceLevel


class ExerciseCatalog:
    """Read-only exercise registry.

    Entries are frozen pydantic models held in a tuple, so a single catalog
    can be shared between concurrent plan generations.
    """

    def __init__(self, exercises: Iterable[Exercise]) -> None:
        self.exercises: Tuple[Exercise, ...] = tuple(exercises)
        self._by_id: Dict[str, Exercise] = {}
        for ex in self.exercises:
            if ex.id in self._by_id:
                raise ValueError(f"Duplicate exercise id in catalog: {ex.id}")
            self._by_id[ex.id] = ex

    @classmethod
    def from_json(cls, path: str | Path) -> "ExerciseCatalog":
        if not os.path.exists(path):
            raise FileNotFoundError(f"Could not find exercise catalog at {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        catalog = cls(Exercise(**e) for e in raw)
        logger.info(f"Loaded {len(catalog)} exercises from {path}")
        return catalog

    def __len__(self) -> int:
        return len(self.exercises)

    def __iter__(self):
        return iter(self.exercises)

    def __contains__(self, exercise_id: str) -> bool:
        return exercise_id in self._by_id

    def get(self, exercise_id: str) -> Exercise:
        try:
            return self._by_id[exercise_id]
        except KeyError:
            raise KeyError(f"Unknown exercise id: {exercise_id}") from None

    def filter(
        self,
        *,
        equipment_available: Iterable[str] | None = None,
        max_difficulty: ExperienceLevel | None = None,
        primary_muscles: Iterable[str] | None = None,
        category_any_of: Iterable[Category | str] | None = None,
        exclude_contraindications: Iterable[str] | None = None,
    ) -> List[Exercise]:
        available = set(equipment_available) if equipment_available is not None else None
        muscles = {m.lower() for m in primary_muscles} if primary_muscles else None
        categories = {Category(c) for c in category_any_of} if category_any_of else None
        avoid = {t.lower() for t in exclude_contraindications} if exclude_contraindications else None

        def ok(ex: Exercise) -> bool:
            if available is not None:
                if not set(ex.required_equipment).issubset(available):
                    return False
            if max_difficulty is not None:
                if ex.difficulty.rank > ExperienceLevel(max_difficulty).rank:
                    return False
            if muscles:
                if ex.primary_muscle not in muscles:
                    return False
            if categories:
                if ex.category not in categories:
                    return False
            if avoid:
                if avoid.intersection(ex.contraindications):
                    return False
            return True

        return [ex for ex in self.exercises if ok(ex)]

    def muscle_groups(self) -> List[str]:
        seen: List[str] = []
        for ex in self.exercises:
            if ex.primary_muscle not in seen:
                seen.append(ex.primary_muscle)
        return seen

    def known_contraindications(self) -> set[str]:
        tags: set[str] = set()
        for ex in self.exercises:
            tags.update(ex.contraindications)
        return tags


@lru_cache(maxsize=None)
def load_catalog(path: str | None = None) -> ExerciseCatalog:
    """Load a catalog once per process and path."""
    return ExerciseCatalog.from_json(path or CATALOG_PATH)
