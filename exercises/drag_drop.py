"""Drag-and-drop placement board and validator."""

from typing import Any

from loguru import logger

from exercises.base import AnswerValidator, GradeResult
from models import DragDropExercise


class DragDropBoard:
    """Mutable placement state for one drag-and-drop attempt.

    An item sits in at most one zone at a time. A move removes the item from
    every zone before placing it in the target, and rejected moves leave the
    board untouched.
    """

    def __init__(self, exercise: DragDropExercise):
        self.exercise = exercise
        self._zones: dict[str, list[str]] = {zone.id: [] for zone in exercise.drop_zones}

    def can_place(self, item_id: str, zone_id: str) -> bool:
        """Check whether moving the item into the zone would be accepted."""
        item = self.exercise.get_item(item_id)
        zone = self.exercise.get_zone(zone_id)
        if item is None or zone is None:
            return False

        if zone.accepts_category and item.category and zone.accepts_category != item.category:
            return False

        if zone.max_items is not None and len(self._zones[zone_id]) >= zone.max_items:
            return False

        return True

    def move(self, item_id: str, zone_id: str) -> bool:
        """Move an item into a zone.

        Returns:
            True if the move was applied, False if it was rejected.
        """
        if not self.can_place(item_id, zone_id):
            logger.debug(f"Rejected move of {item_id!r} into {zone_id!r}")
            return False

        for contents in self._zones.values():
            if item_id in contents:
                contents.remove(item_id)
        self._zones[zone_id].append(item_id)
        return True

    def remove(self, item_id: str) -> bool:
        """Return an item to the pool of unplaced items."""
        for contents in self._zones.values():
            if item_id in contents:
                contents.remove(item_id)
                return True
        return False

    def zone_of(self, item_id: str) -> str | None:
        for zone_id, contents in self._zones.items():
            if item_id in contents:
                return zone_id
        return None

    def items_in(self, zone_id: str) -> list[str]:
        return list(self._zones.get(zone_id, []))

    def available_items(self) -> list[str]:
        """Item ids not yet placed in any zone, in declaration order."""
        placed = {item_id for contents in self._zones.values() for item_id in contents}
        return [item.id for item in self.exercise.items if item.id not in placed]

    def snapshot(self) -> dict[str, list[str]]:
        """Copy of the zone contents, suitable as a raw answer."""
        return {zone_id: list(contents) for zone_id, contents in self._zones.items()}


def _placements(raw_answer: Any) -> dict[str, list[str]] | None:
    """Normalize a raw answer to zone id -> item ids."""
    if isinstance(raw_answer, DragDropBoard):
        return raw_answer.snapshot()
    if not isinstance(raw_answer, dict):
        return None

    placements: dict[str, list[str]] = {}
    for zone_id, contents in raw_answer.items():
        if not isinstance(zone_id, str) or not isinstance(contents, (list, tuple)):
            continue
        placements[zone_id] = [item_id for item_id in contents if isinstance(item_id, str)]
    return placements


class DragDropValidator(AnswerValidator[DragDropExercise]):
    """Per-item grading against `correct_mapping` with partial credit."""

    def grade(self, raw_answer: Any) -> GradeResult:
        placements = _placements(raw_answer)
        if placements is None:
            return GradeResult.incorrect("answer is not a zone mapping")

        locations: dict[str, list[str]] = {}
        for zone_id, contents in placements.items():
            if self.exercise.get_zone(zone_id) is None:
                continue
            for item_id in contents:
                locations.setdefault(item_id, []).append(zone_id)

        results: dict[str, bool] = {}
        for item_id, expected_zone in self.exercise.correct_mapping.items():
            zones = locations.get(item_id, [])
            # An item reported in several zones is ambiguous and scores nothing
            results[item_id] = zones == [expected_zone]

        correct_count = sum(results.values())
        total = len(self.exercise.correct_mapping)

        return GradeResult(
            is_fully_correct=correct_count == total,
            partial_score=self.partial(correct_count, total),
            details={"items": results, "correct_count": correct_count, "total": total},
        )
