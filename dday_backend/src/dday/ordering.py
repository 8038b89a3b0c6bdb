from __future__ import annotations

from typing import Iterable, List, Mapping, Tuple, TypeVar

from .dates import DateInput, day_offset

T = TypeVar("T", bound=Mapping)


def _sort_key(task: Mapping, today: DateInput) -> Tuple[bool, int]:
    # False sorts before True, so open tasks come first
    return bool(task["completed"]), day_offset(task["target_date"], today)


# PUBLIC_INTERFACE
def sort_tasks(tasks: Iterable[T], today: DateInput) -> List[T]:
    """
    Order tasks by urgency.

    Incomplete tasks come before completed ones; within each group tasks are
    ordered by ascending day offset, so overdue tasks (negative offsets) lead.
    The sort is stable and a new list is returned; the input is not modified.
    """
    return sorted(tasks, key=lambda t: _sort_key(t, today))
