"""
Progress aggregation and sequential module unlock.

Pure functions over a module list and one user's progress rows. Module i (by
order_index) unlocks once module i-1 is completed; index 0 is always open; a
manager override opens everything for the current view only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from api.services.records import ModuleRecord, ProgressRecord, ViewerContext


@dataclass(frozen=True)
class ModuleState:
    module: ModuleRecord
    completed: bool = False
    progress_percentage: int = 0

    @property
    def untouched(self) -> bool:
        return not self.completed and self.progress_percentage == 0

    @property
    def in_progress(self) -> bool:
        return not self.completed and 0 < self.progress_percentage < 100


def order_modules(modules: Iterable[ModuleRecord]) -> list[ModuleRecord]:
    """Sort by order_index; ties keep fetch order."""
    return sorted(modules, key=lambda m: m.order_index)


def module_states(
    modules: Iterable[ModuleRecord],
    progress_rows: Iterable[ProgressRecord],
) -> list[ModuleState]:
    """
    Join modules with a single user's progress rows.
    Missing rows default to (completed=False, progress_percentage=0). Rows for
    modules not in the list are ignored.
    """
    by_module = {p.module_id: p for p in progress_rows}
    states: list[ModuleState] = []
    for m in order_modules(modules):
        p = by_module.get(m.id)
        if p is None:
            states.append(ModuleState(module=m))
            continue
        completed = bool(p.completed)
        pct = 100 if completed else max(0, min(int(p.progress_percentage or 0), 100))
        states.append(ModuleState(module=m, completed=completed, progress_percentage=pct))
    return states


def unlocked_indices(states: list[ModuleState], context: Optional[ViewerContext] = None) -> set[int]:
    """Indices the viewer may open: {0} plus every i whose predecessor is completed."""
    if not states:
        return set()
    if context is not None and context.bypass_unlock:
        return set(range(len(states)))
    unlocked = {0}
    for i in range(1, len(states)):
        if states[i - 1].completed:
            unlocked.add(i)
    return unlocked


def is_unlocked(states: list[ModuleState], module_id: str, context: Optional[ViewerContext] = None) -> bool:
    """False for unknown module ids."""
    unlocked = unlocked_indices(states, context)
    for i, s in enumerate(states):
        if s.module.id == module_id:
            return i in unlocked
    return False


def upcoming_modules(states: list[ModuleState], limit: int = 3) -> list[ModuleState]:
    """
    "Next steps": unlocked modules that still need work.
    The first module only counts while untouched; later ones count as soon as the
    predecessor is completed and they are not.
    """
    upcoming: list[ModuleState] = []
    for i, s in enumerate(states):
        if i == 0:
            if s.untouched:
                upcoming.append(s)
        elif states[i - 1].completed and not s.completed:
            upcoming.append(s)
    return upcoming[:limit]


def unlock_notifications(states: list[ModuleState]) -> list[str]:
    """One message per module that became available but has not been opened yet."""
    notes: list[str] = []
    for i in range(1, len(states)):
        if states[i - 1].completed and states[i].untouched:
            notes.append(f'New module unlocked: "{states[i].module.title}"')
    return notes


def merge_progress(
    existing: Optional[ProgressRecord],
    *,
    user_id: int,
    module_id: str,
    percentage: int,
    completed: bool,
    now: datetime,
) -> ProgressRecord:
    """
    Apply a progress update without ever moving backwards.

    - percentage never decreases while the module is open
    - completion pins the percentage to 100 and is never reverted
    - completed_at is set on the first completion only
    """
    pct = max(0, min(int(percentage), 100))
    if existing is not None and existing.completed:
        return ProgressRecord(
            user_id=user_id,
            module_id=module_id,
            completed=True,
            progress_percentage=100,
            completed_at=existing.completed_at or now,
        )
    prior = int(existing.progress_percentage) if existing is not None else 0
    if completed:
        return ProgressRecord(
            user_id=user_id,
            module_id=module_id,
            completed=True,
            progress_percentage=100,
            completed_at=now,
        )
    return ProgressRecord(
        user_id=user_id,
        module_id=module_id,
        completed=False,
        progress_percentage=max(prior, pct),
        completed_at=None,
    )
