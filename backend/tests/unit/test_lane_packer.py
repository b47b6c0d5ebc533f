"""
Unit tests for LanePacker and the overlap helpers.
"""

from datetime import date, timedelta

from hypothesis import given
from hypothesis import strategies as st

from planboard.models.task import Task
from planboard.services.lane_packer import LanePacker, find_overlapping_tasks, tasks_overlap

BASE = date(2025, 1, 1)


def make_task(task_id: str, start_offset: int, length: int = 1, track_id: str = "A") -> Task:
    start = BASE + timedelta(days=start_offset)
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        track_id=track_id,
        start=start,
        end=start + timedelta(days=length - 1),
    )


task_ranges = st.lists(
    st.tuples(st.integers(min_value=0, max_value=60), st.integers(min_value=1, max_value=15)),
    max_size=30,
)


def build_tasks(ranges) -> list[Task]:
    return [make_task(f"t{i}", offset, length) for i, (offset, length) in enumerate(ranges)]


class TestOverlap:
    def test_shared_day_overlaps(self):
        """Ranges sharing one day overlap."""
        assert tasks_overlap(make_task("a", 0, 5), make_task("b", 4, 2))

    def test_adjacent_days_do_not_overlap(self):
        """Back-to-back ranges do not overlap."""
        assert not tasks_overlap(make_task("a", 0, 5), make_task("b", 5, 2))

    def test_self_is_excluded(self):
        """A task never overlaps itself."""
        task = make_task("a", 0, 5)
        assert not tasks_overlap(task, task)

    def test_find_overlapping(self):
        """Only tasks sharing a day are returned."""
        a = make_task("a", 0, 5)
        others = [a, make_task("b", 2), make_task("c", 10)]
        assert [t.id for t in find_overlapping_tasks(a, others)] == ["b"]

    @given(st.tuples(st.integers(0, 30), st.integers(1, 10)), st.tuples(st.integers(0, 30), st.integers(1, 10)))
    def test_symmetric(self, range_a, range_b):
        """Overlap is symmetric."""
        a = make_task("a", *range_a)
        b = make_task("b", *range_b)
        assert tasks_overlap(a, b) == tasks_overlap(b, a)


class TestPack:
    def test_empty_track(self):
        """A track with no tasks has no lanes."""
        packing = LanePacker(max_lanes=10).pack([])
        assert packing.lanes == {}
        assert packing.lane_count == 0

    def test_sequential_tasks_share_lane(self):
        """Non-overlapping tasks stay in lane 0."""
        packing = LanePacker(max_lanes=10).pack(
            [make_task("a", 0, 3), make_task("b", 3, 3), make_task("c", 6, 3)]
        )
        assert set(packing.lanes.values()) == {0}
        assert packing.lane_count == 1

    def test_overlapping_tasks_get_new_lanes(self):
        """Each overlapping task opens a new lane."""
        packing = LanePacker(max_lanes=10).pack(
            [make_task("a", 0, 5), make_task("b", 1, 5), make_task("c", 2, 1)]
        )
        assert packing.lanes == {"a": 0, "b": 1, "c": 2}
        assert packing.lane_count == 3

    def test_first_fit_reuses_freed_lane(self):
        """A task takes the lowest lane that is free again."""
        packing = LanePacker(max_lanes=10).pack(
            [make_task("a", 0, 2), make_task("b", 0, 10), make_task("c", 3, 2)]
        )
        assert packing.lanes["c"] == 0

    def test_ties_broken_by_id(self):
        """Tasks with the same start are packed in id order."""
        packing = LanePacker(max_lanes=10).pack([make_task("z", 0, 3), make_task("m", 0, 3)])
        assert packing.lanes == {"m": 0, "z": 1}

    def test_lane_cap_stacks_overflow_in_last_lane(self):
        """Past the lane cap, overflow stacks in the last lane."""
        tasks = [make_task(f"t{i}", 0, 5) for i in range(4)]
        packing = LanePacker(max_lanes=2).pack(tasks)
        assert packing.lane_count == 2
        assert packing.lanes["t2"] == 1
        assert packing.lanes["t3"] == 1
        assert packing.overflow_task_ids == ["t2", "t3"]

    def test_default_lane_cap_from_settings(self):
        """The lane cap defaults to MAX_LANES."""
        assert LanePacker().max_lanes == 10

    @given(task_ranges)
    def test_no_overlapping_tasks_in_one_lane(self, ranges):
        """Below the cap, no lane holds two overlapping tasks."""
        tasks = build_tasks(ranges)
        packing = LanePacker(max_lanes=len(tasks) + 1).pack(tasks)
        assert packing.overflow_task_ids == []
        for a in tasks:
            for b in tasks:
                if packing.lanes[a.id] == packing.lanes[b.id]:
                    assert not tasks_overlap(a, b)

    @given(task_ranges, st.randoms())
    def test_deterministic_regardless_of_input_order(self, ranges, rnd):
        """Shuffled input packs into the same lanes."""
        tasks = build_tasks(ranges)
        shuffled = list(tasks)
        rnd.shuffle(shuffled)
        packer = LanePacker(max_lanes=len(tasks) + 1)
        assert packer.pack(tasks) == packer.pack(shuffled)
