from datetime import date, time, timedelta

import pytest

from src.dday.errors import InvalidNotifyOffset
from src.dday.notifications import (
    notify_days_display,
    should_notify_today,
    tasks_to_notify,
    validate_notify_offsets,
)

TODAY = date(2025, 3, 10)


def make_task(name="t", target=TODAY, offsets=(0, 1, 3), completed=False, at=time(9, 0)):
    return {
        "id": name,
        "target_date": target,
        "notify_offsets": list(offsets),
        "completed": completed,
        "notification_time": at,
    }


class TestShouldNotifyToday:
    def test_fires_on_matching_offset(self):
        task = make_task(target=TODAY + timedelta(days=3), offsets={0, 1, 3})
        assert should_notify_today(task, TODAY) is True

    def test_silent_when_offset_not_requested(self):
        task = make_task(target=TODAY + timedelta(days=3), offsets={0, 1, 3})
        # One day later the live offset is 2, which is not requested
        assert should_notify_today(task, TODAY + timedelta(days=1)) is False

    def test_target_two_days_out_is_not_a_notify_day(self):
        task = make_task(target=TODAY + timedelta(days=3), offsets={0, 1, 3})
        assert should_notify_today(task, TODAY) is True
        assert should_notify_today({**task, "target_date": TODAY + timedelta(days=2)}, TODAY) is False

    def test_fires_on_dday_when_zero_requested(self):
        assert should_notify_today(make_task(target=TODAY, offsets=[0]), TODAY) is True

    def test_each_offset_fires_on_exactly_one_day(self):
        target = TODAY + timedelta(days=10)
        task = make_task(target=target, offsets=[0, 1, 3])
        firing = [
            d for d in (TODAY + timedelta(days=i) for i in range(-5, 20)) if should_notify_today(task, d)
        ]
        assert firing == [target - timedelta(days=3), target - timedelta(days=1), target]

    def test_never_fires_after_the_dday(self):
        task = make_task(target=TODAY - timedelta(days=1), offsets=[0, 1, 3])
        assert should_notify_today(task, TODAY) is False

    def test_missed_day_is_not_caught_up(self):
        task = make_task(target=TODAY + timedelta(days=2), offsets=[3])
        # The D-3 day was yesterday; nothing fires now or later
        assert not any(should_notify_today(task, TODAY + timedelta(days=i)) for i in range(0, 5))

    def test_duplicates_and_order_do_not_matter(self):
        target = TODAY + timedelta(days=1)
        assert should_notify_today(make_task(target=target, offsets=[1, 1, 0]), TODAY)
        assert should_notify_today(make_task(target=target, offsets=[3, 1]), TODAY)
        assert should_notify_today(make_task(target=target, offsets=(1, 3)), TODAY)

    def test_empty_offsets_never_fire(self):
        assert should_notify_today(make_task(offsets=[]), TODAY) is False

    def test_idempotent(self):
        task = make_task(target=TODAY + timedelta(days=1))
        assert should_notify_today(task, TODAY) == should_notify_today(task, TODAY)


class TestNotifyDaysDisplay:
    def test_sorted_with_dday_for_zero(self):
        assert notify_days_display(make_task(offsets={3, 0, 1})) == ["D-Day", "D-1", "D-3"]

    def test_duplicates_collapse(self):
        assert notify_days_display(make_task(offsets=[7, 1, 7])) == ["D-1", "D-7"]

    def test_empty(self):
        assert notify_days_display(make_task(offsets=[])) == []

    def test_idempotent(self):
        task = make_task(offsets=[2, 0])
        assert notify_days_display(task) == notify_days_display(task)


class TestValidateNotifyOffsets:
    def test_returns_distinct_ascending(self):
        assert validate_notify_offsets([3, 0, 1, 3]) == [0, 1, 3]

    def test_accepts_any_iterable(self):
        assert validate_notify_offsets({2, 7}) == [2, 7]
        assert validate_notify_offsets([]) == []

    @pytest.mark.parametrize("bad", [[-1], [0, 1, -3]])
    def test_rejects_negative(self, bad):
        with pytest.raises(InvalidNotifyOffset):
            validate_notify_offsets(bad)

    @pytest.mark.parametrize("bad", [[1.5], ["1"], [True]])
    def test_rejects_non_integers(self, bad):
        with pytest.raises(InvalidNotifyOffset):
            validate_notify_offsets(bad)


class TestTasksToNotify:
    def test_selects_open_tasks_due_today_by_time(self):
        tomorrow = TODAY + timedelta(days=1)
        late = make_task("late", tomorrow, [1], at=time(18, 30))
        early = make_task("early", TODAY, [0], at=time(7, 0))
        done = make_task("done", TODAY, [0], completed=True)
        quiet = make_task("quiet", tomorrow, [0])
        result = tasks_to_notify([late, done, quiet, early], TODAY)
        assert [t["id"] for t in result] == ["early", "late"]

    def test_equal_times_keep_input_order(self):
        tasks = [make_task(f"t{i}", TODAY, [0]) for i in range(4)]
        assert [t["id"] for t in tasks_to_notify(tasks, TODAY)] == ["t0", "t1", "t2", "t3"]

    def test_does_not_mutate_input(self):
        tasks = [make_task("b", TODAY, [0], at=time(10)), make_task("a", TODAY, [0], at=time(8))]
        tasks_to_notify(tasks, TODAY)
        assert [t["id"] for t in tasks] == ["b", "a"]
