"""RunPlanBuilder — turns themes + a seed into the ordered room sequence."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, Sequence

from dungeon_run.core.enums import Domain
from dungeon_run.core.errors import PlanConfigError
from dungeon_run.systems.rng import DeterministicRNG, resolve_seed
from dungeon_run.systems.room_validator import validate_blueprint

if TYPE_CHECKING:
    from dungeon_run.core.blueprints import RoomBlueprint, Theme

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlanEntry:
    """One chosen room: where it came from and what it is."""

    slot: int
    theme: str
    pool_index: int
    blueprint: RoomBlueprint


@dataclass(frozen=True, slots=True)
class RunPlan:
    """Ordered, seed-derived sequence of blueprint choices.

    ``skipped_slots`` lists requested positions that produced no room
    because their theme pool was empty; such a plan is shorter than
    ``requested``.
    """

    seed: int
    requested: int
    entries: tuple[PlanEntry, ...]
    skipped_slots: tuple[int, ...] = ()
    fixed: bool = False

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> PlanEntry:
        return self.entries[index]

    def __iter__(self) -> Iterator[PlanEntry]:
        return iter(self.entries)

    @property
    def is_short(self) -> bool:
        return len(self.entries) < self.requested

    def blueprint_names(self) -> list[str]:
        return [e.blueprint.name for e in self.entries]


class RunPlanBuilder:
    """Builds run plans.  Stateless; the RNG is derived from the seed per build."""

    __slots__ = ()

    def build(
        self,
        seed: int,
        total_rooms: int,
        rooms_per_theme: int,
        themes: Iterable[Theme],
    ) -> RunPlan:
        """Pick one blueprint per slot from the theme owning that slot's block.

        Slot ``i`` belongs to block ``i // rooms_per_theme``; blocks past the
        last theme reuse the last theme.  Empty pools are reported and their
        slots skipped.
        """
        theme_list = tuple(themes)
        if total_rooms < 1:
            raise PlanConfigError(f"total_rooms must be >= 1, got {total_rooms}")
        if rooms_per_theme < 1:
            raise PlanConfigError(f"rooms_per_theme must be >= 1, got {rooms_per_theme}")
        if not theme_list:
            raise PlanConfigError("At least one theme is required to build a run plan")

        effective_seed = resolve_seed(seed)
        logger.info("Building run plan with seed %d", effective_seed)
        rng = DeterministicRNG(effective_seed).stream(Domain.PLAN)

        entries: list[PlanEntry] = []
        skipped: list[int] = []
        for i in range(total_rooms):
            block = i // rooms_per_theme
            theme = theme_list[max(0, min(block, len(theme_list) - 1))]
            pool = theme.rooms
            if not pool:
                logger.error("Theme '%s' has no rooms assigned; skipping plan slot %d", theme.name, i)
                skipped.append(i)
                continue

            pick = rng.next(0, len(pool))
            choice = pool[pick]
            for issue in validate_blueprint(choice, theme.name):
                logger.warning("Room '%s' in theme '%s' %s", issue.blueprint, issue.theme, issue.message)
            entries.append(PlanEntry(slot=i, theme=theme.name, pool_index=pick, blueprint=choice))

        if skipped:
            logger.warning(
                "Run plan is shorter than requested: %d of %d rooms (skipped slots %s)",
                len(entries), total_rooms, skipped,
            )
        return RunPlan(
            seed=effective_seed,
            requested=total_rooms,
            entries=tuple(entries),
            skipped_slots=tuple(skipped),
        )

    def build_fixed(
        self,
        sequence: Sequence[RoomBlueprint | None],
        total_rooms: int,
        seed: int = 0,
    ) -> RunPlan:
        """Cycle through an explicit blueprint sequence, ignoring themes."""
        if total_rooms < 1:
            raise PlanConfigError(f"total_rooms must be >= 1, got {total_rooms}")
        if not sequence:
            raise PlanConfigError("Fixed room sequence is empty")

        logger.info("Fixed sequence mode: cycling %d rooms", len(sequence))
        entries: list[PlanEntry] = []
        skipped: list[int] = []
        for i in range(total_rooms):
            index = i % len(sequence)
            room = sequence[index]
            if room is None:
                logger.warning("Fixed sequence entry %d is missing; skipping plan slot %d", index, i)
                skipped.append(i)
                continue
            entries.append(PlanEntry(slot=i, theme="", pool_index=index, blueprint=room))

        return RunPlan(
            seed=resolve_seed(seed),
            requested=total_rooms,
            entries=tuple(entries),
            skipped_slots=tuple(skipped),
            fixed=True,
        )
