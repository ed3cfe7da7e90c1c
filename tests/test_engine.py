"""Tests for the simulation engine.

``simulate`` replays a reference string under one policy and returns
a snapshot per step.  These tests pin down exact traces for the
classic textbook string, the degenerate frame counts, input
validation, and the invariants every run must satisfy.
"""

import random

import pytest

from pagesim.engine import simulate
from pagesim.logging import Logger, LogLevel
from pagesim.policies import Policy
from pagesim.trace import SimulationResult
from pagesim.validation import InvalidFrameCountError, NonNumericReferenceError, UnknownPolicyError

CLASSIC = [7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3]
CLASSIC_FRAMES = 3


# -- Classic scenario -----------------------------------------------------------


class TestClassicScenario:
    """Verify the textbook string 7,0,1,2,0,3,0,4,2,3,0,3 with 3 frames."""

    def test_fifo_faults(self) -> None:
        """FIFO should fault 10 times."""
        expected = 10
        assert simulate(Policy.FIFO, CLASSIC, CLASSIC_FRAMES).faults == expected

    def test_lru_faults(self) -> None:
        """LRU should fault 9 times."""
        expected = 9
        assert simulate(Policy.LRU, CLASSIC, CLASSIC_FRAMES).faults == expected

    def test_optimal_faults(self) -> None:
        """Optimal should fault 7 times."""
        expected = 7
        assert simulate(Policy.OPTIMAL, CLASSIC, CLASSIC_FRAMES).faults == expected

    def test_ordering(self) -> None:
        """Optimal <= LRU <= FIFO on this string."""
        fifo = simulate(Policy.FIFO, CLASSIC, CLASSIC_FRAMES).faults
        lru = simulate(Policy.LRU, CLASSIC, CLASSIC_FRAMES).faults
        optimal = simulate(Policy.OPTIMAL, CLASSIC, CLASSIC_FRAMES).faults
        assert optimal <= lru <= fifo

    @pytest.mark.parametrize("policy", list(Policy))
    def test_counts_add_up(self, policy: Policy) -> None:
        """Hits plus faults should equal the 12 references."""
        result = simulate(policy, CLASSIC, CLASSIC_FRAMES)
        assert result.hits + result.faults == len(CLASSIC)
        assert len(result.snapshots) == len(CLASSIC)

    def test_fifo_trace(self) -> None:
        """FIFO frames and evictions should match the hand-worked trace."""
        result = simulate(Policy.FIFO, CLASSIC, CLASSIC_FRAMES)
        assert [s.frames for s in result.snapshots] == [
            (7, None, None),
            (7, 0, None),
            (7, 0, 1),
            (2, 0, 1),
            (2, 0, 1),
            (2, 3, 1),
            (2, 3, 0),
            (4, 3, 0),
            (4, 2, 0),
            (4, 2, 3),
            (0, 2, 3),
            (0, 2, 3),
        ]
        assert [s.evicted for s in result.snapshots] == [
            None, None, None, 7, None, 0, 1, 2, 3, 0, 4, None,
        ]  # fmt: skip

    def test_lru_trace(self) -> None:
        """LRU frames and evictions should match the hand-worked trace."""
        result = simulate(Policy.LRU, CLASSIC, CLASSIC_FRAMES)
        assert [s.frames for s in result.snapshots][3:] == [
            (2, 0, 1),
            (2, 0, 1),
            (2, 0, 3),
            (2, 0, 3),
            (4, 0, 3),
            (4, 0, 2),
            (4, 3, 2),
            (0, 3, 2),
            (0, 3, 2),
        ]
        evictions = [s.evicted for s in result.snapshots if s.evicted is not None]
        assert evictions == [7, 1, 2, 3, 0, 4]

    def test_optimal_trace(self) -> None:
        """Optimal frames and evictions should match the hand-worked trace."""
        result = simulate(Policy.OPTIMAL, CLASSIC, CLASSIC_FRAMES)
        assert [s.frames for s in result.snapshots][3:] == [
            (2, 0, 1),
            (2, 0, 1),
            (2, 0, 3),
            (2, 0, 3),
            (2, 4, 3),
            (2, 4, 3),
            (2, 4, 3),
            (0, 4, 3),
            (0, 4, 3),
        ]
        evictions = [s.evicted for s in result.snapshots if s.evicted is not None]
        assert evictions == [7, 1, 0, 2]

    def test_snapshot_metadata(self) -> None:
        """Each snapshot should carry its step index and requested page."""
        result = simulate(Policy.FIFO, CLASSIC, CLASSIC_FRAMES)
        assert [s.step for s in result.snapshots] == list(range(len(CLASSIC)))
        assert [s.page for s in result.snapshots] == CLASSIC
        hit_steps = [s.step for s in result.snapshots if s.hit]
        assert hit_steps == [4, 11]


# -- FIFO vs LRU divergence -----------------------------------------------------


class TestHitsAndEvictionOrder:
    """Verify that hits affect LRU but never FIFO."""

    def test_fifo_ignores_repeated_access(self) -> None:
        """After re-using page 1, FIFO still evicts it (oldest load)."""
        result = simulate(Policy.FIFO, [1, 2, 1, 3], 2)
        last = result.snapshots[-1]
        assert last.evicted == 1
        assert last.frames == (3, 2)

    def test_lru_honours_repeated_access(self) -> None:
        """After re-using page 1, LRU evicts page 2 instead."""
        result = simulate(Policy.LRU, [1, 2, 1, 3], 2)
        last = result.snapshots[-1]
        assert last.evicted == 2  # noqa: PLR2004
        assert last.frames == (1, 3)

    def test_belady_anomaly_under_fifo(self) -> None:
        """FIFO can fault more with more frames (Belady's anomaly)."""
        refs = [1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5]
        three = simulate(Policy.FIFO, refs, 3).faults
        four = simulate(Policy.FIFO, refs, 4).faults
        expected_three, expected_four = 9, 10
        assert (three, four) == (expected_three, expected_four)


# -- Degenerate inputs ----------------------------------------------------------


class TestDegenerateInputs:
    """Verify one frame, ample frames and empty input."""

    @pytest.mark.parametrize("policy", list(Policy))
    def test_single_frame(self, policy: Policy) -> None:
        """With one frame, only immediate repeats can hit."""
        refs = [1, 1, 2, 2, 2, 1, 3, 3]
        result = simulate(policy, refs, 1)
        expected_hits = [False, True, False, True, True, False, False, True]
        assert [s.hit for s in result.snapshots] == expected_hits

    @pytest.mark.parametrize("policy", list(Policy))
    def test_ample_frames_only_compulsory_faults(self, policy: Policy) -> None:
        """With at least as many frames as distinct pages, only first uses fault."""
        refs = [3, 1, 3, 2, 1, 2, 3, 1]
        result = simulate(policy, refs, 3)
        expected_faults = 3
        assert result.faults == expected_faults
        assert all(s.evicted is None for s in result.snapshots)
        assert not any(s.fault for s in result.snapshots[4:])

    @pytest.mark.parametrize("policy", list(Policy))
    def test_empty_sequence_is_valid(self, policy: Policy) -> None:
        """An empty reference sequence yields an empty trace, zero faults."""
        result = simulate(policy, [], 3)
        assert result.snapshots == ()
        assert result.faults == 0
        assert result.hit_ratio == 0.0

    def test_accepts_generators(self) -> None:
        """Any iterable of ints should be accepted and frozen."""
        result = simulate("fifo", (p for p in [1, 2, 1]), 2)
        assert result.references == (1, 2, 1)


# -- Validation -----------------------------------------------------------------


class TestValidation:
    """Verify bad inputs are refused before any simulation happens."""

    @pytest.mark.parametrize("frames", [0, -3, 1.5, "3", None, True])
    def test_invalid_frame_count(self, frames: object) -> None:
        """Non-positive or non-integer frame counts should be rejected."""
        with pytest.raises(InvalidFrameCountError):
            simulate(Policy.FIFO, [1, 2], frames)  # pyright: ignore[reportArgumentType]

    @pytest.mark.parametrize("bad", ["7", 1.0, None, False, float("nan")])
    def test_non_numeric_reference(self, bad: object) -> None:
        """References that aren't ints should be rejected."""
        with pytest.raises(NonNumericReferenceError, match="position 1"):
            simulate(Policy.LRU, [1, bad, 2], 2)  # pyright: ignore[reportArgumentType]

    def test_unknown_policy(self) -> None:
        """An unknown policy name should be rejected."""
        with pytest.raises(UnknownPolicyError):
            simulate("random", [1], 1)

    def test_policy_by_name(self) -> None:
        """Policy names should be accepted in place of members."""
        result = simulate("optimal", CLASSIC, CLASSIC_FRAMES)
        assert result.policy is Policy.OPTIMAL

    def test_negative_pages_allowed(self) -> None:
        """Page numbers are plain identifiers; negatives are fine."""
        result = simulate(Policy.FIFO, [-1, -1, 0], 1)
        expected_faults = 2
        assert result.faults == expected_faults


# -- Logging ---------------------------------------------------------------------


class TestLogging:
    """Verify the optional event log."""

    def test_one_debug_entry_per_fault(self) -> None:
        """Each fault should be logged at DEBUG with its step."""
        logger = Logger()
        result = simulate(Policy.FIFO, CLASSIC, CLASSIC_FRAMES, logger=logger)
        debug = [e for e in logger.entries if e.level is LogLevel.DEBUG]
        assert len(debug) == result.faults
        assert [e.step for e in debug] == [s.step for s in result.snapshots if s.fault]
        assert all(e.source == "FIFO" for e in debug)

    def test_eviction_named_in_message(self) -> None:
        """A fault that evicts should name the victim."""
        logger = Logger()
        simulate(Policy.FIFO, [1, 2], 1, logger=logger)
        assert "evicted page 1" in logger.entries[1].message

    def test_summary_entry(self) -> None:
        """The run should end with an INFO summary."""
        logger = Logger()
        simulate(Policy.LRU, CLASSIC, CLASSIC_FRAMES, logger=logger)
        last = logger.entries[-1]
        assert last.level is LogLevel.INFO
        assert "9 faults" in last.message

    def test_no_logger_no_side_effects(self) -> None:
        """Without a logger the run is silent (and still correct)."""
        result = simulate(Policy.LRU, CLASSIC, CLASSIC_FRAMES)
        expected = 9
        assert result.faults == expected


# -- Invariants over many inputs --------------------------------------------------


def _random_cases(count: int) -> list[tuple[list[int], int]]:
    """Build deterministic pseudo-random (references, frames) pairs."""
    rng = random.Random(571)
    cases: list[tuple[list[int], int]] = []
    for _ in range(count):
        length = rng.randint(0, 40)
        pages = rng.randint(1, 8)
        refs = [rng.randrange(pages) for _ in range(length)]
        cases.append((refs, rng.randint(1, 6)))
    return cases


CASES = _random_cases(150)


class TestInvariants:
    """Verify properties that must hold for every policy and input."""

    @staticmethod
    def _check_trace(result: SimulationResult, refs: list[int], frames: int) -> None:
        assert len(result.snapshots) == len(refs)
        assert result.faults + result.hits == len(refs)
        previous: tuple[int | None, ...] = (None,) * frames
        for snapshot in result.snapshots:
            resident = [p for p in snapshot.frames if p is not None]
            assert len(resident) == len(set(resident))
            assert len(snapshot.frames) == frames
            # A hit iff the page was resident just before the step.
            assert snapshot.hit == (snapshot.page in previous)
            assert snapshot.page in snapshot.frames
            if snapshot.evicted is not None:
                assert snapshot.fault
                assert None not in previous
                assert snapshot.evicted in previous
                assert snapshot.evicted not in snapshot.frames
            previous = snapshot.frames

    @pytest.mark.parametrize("policy", list(Policy))
    def test_trace_invariants(self, policy: Policy) -> None:
        """Counts, residency and hit classification hold on every step."""
        for refs, frames in CASES:
            self._check_trace(simulate(policy, refs, frames), refs, frames)

    def test_optimal_never_worse(self) -> None:
        """Optimal faults <= FIFO faults and <= LRU faults, always."""
        for refs, frames in CASES:
            optimal = simulate(Policy.OPTIMAL, refs, frames).faults
            assert optimal <= simulate(Policy.FIFO, refs, frames).faults
            assert optimal <= simulate(Policy.LRU, refs, frames).faults

    @pytest.mark.parametrize("policy", list(Policy))
    def test_deterministic(self, policy: Policy) -> None:
        """The same input should always produce the same trace."""
        for refs, frames in CASES[:20]:
            assert simulate(policy, refs, frames) == simulate(policy, refs, frames)

    def test_caller_list_not_mutated(self) -> None:
        """The engine should not touch the caller's sequence."""
        refs = list(CLASSIC)
        simulate(Policy.OPTIMAL, refs, CLASSIC_FRAMES)
        assert refs == CLASSIC
