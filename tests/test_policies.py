"""Tests for the replacement policies in isolation.

Each policy only has to answer one question: when every frame is full,
which slot gets evicted?  These tests drive the policies directly with
hand-built frame sets; ``test_engine.py`` covers full simulations.

Components tested:
    - **Policy**: name lookup and aliases.
    - **FIFOPolicy**: fill-order queue of slot indices.
    - **LRUPolicy**: last-used timestamps, lowest slot wins ties.
    - **OptimalPolicy**: lookahead, first never-used page wins outright.
"""

import pytest

from pagesim.frames import FrameSet
from pagesim.policies import (
    FIFOPolicy,
    LRUPolicy,
    OptimalPolicy,
    Policy,
    make_policy,
    next_use,
)
from pagesim.validation import UnknownPolicyError


def _full_frames(*pages: int) -> FrameSet:
    """Create a frame set exactly filled with *pages*."""
    frames = FrameSet(len(pages))
    for slot, page in enumerate(pages):
        frames.set(slot, page)
    return frames


# -- Policy names ---------------------------------------------------------------


class TestPolicyParse:
    """Verify policy lookup by name."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("FIFO", Policy.FIFO),
            ("fifo", Policy.FIFO),
            (" lru ", Policy.LRU),
            ("Optimal", Policy.OPTIMAL),
            ("opt", Policy.OPTIMAL),
            ("belady", Policy.OPTIMAL),
        ],
    )
    def test_names_and_aliases(self, name: str, expected: Policy) -> None:
        """Names should match case-insensitively, with aliases for Optimal."""
        assert Policy.parse(name) is expected

    def test_member_passes_through(self) -> None:
        """Parsing a Policy member should return it unchanged."""
        assert Policy.parse(Policy.LRU) is Policy.LRU

    def test_unknown_name_raises(self) -> None:
        """An unrecognised name should raise UnknownPolicyError."""
        with pytest.raises(UnknownPolicyError, match="clock"):
            Policy.parse("clock")

    def test_unknown_policy_is_value_error(self) -> None:
        """Callers catching ValueError should also catch unknown policies."""
        with pytest.raises(ValueError):  # noqa: PT011
            Policy.parse("mru")

    def test_make_policy_builds_fresh_instances(self) -> None:
        """Every call should build independent bookkeeping."""
        first = make_policy(Policy.FIFO, [])
        second = make_policy(Policy.FIFO, [])
        assert isinstance(first, FIFOPolicy)
        assert first is not second


# -- FIFO Policy --------------------------------------------------------------


class TestFIFOPolicy:
    """Verify FIFO (First In, First Out) page replacement.

    FIFO evicts from the slot that was filled longest ago.  It tracks
    slot indices, and re-queues a slot as soon as it is refilled.
    """

    def test_selects_first_filled_slot(self) -> None:
        """FIFO should pick the slot that was loaded first."""
        policy = FIFOPolicy()
        frames = _full_frames(10, 20, 30)
        for slot, page in enumerate((10, 20, 30)):
            policy.record_load(slot, page, step=slot)
        assert policy.select_victim(frames, step=3) == 0

    def test_fill_order_not_slot_order(self) -> None:
        """The queue follows fill order even if slots filled out of order."""
        policy = FIFOPolicy()
        frames = _full_frames(10, 20)
        policy.record_load(1, 20, step=0)
        policy.record_load(0, 10, step=1)
        expected_victim = 1
        assert policy.select_victim(frames, step=2) == expected_victim

    def test_access_does_not_change_order(self) -> None:
        """In FIFO, a hit has no effect on eviction order."""
        policy = FIFOPolicy()
        frames = _full_frames(1, 2)
        policy.record_load(0, 1, step=0)
        policy.record_load(1, 2, step=1)
        policy.record_access(1, step=2)
        assert policy.select_victim(frames, step=3) == 0

    def test_evicted_slot_requeued_at_tail(self) -> None:
        """After eviction and refill, the same slot goes to the back."""
        policy = FIFOPolicy()
        frames = _full_frames(1, 2)
        policy.record_load(0, 1, step=0)
        policy.record_load(1, 2, step=1)
        policy.remove_page(1, slot=0)
        policy.record_load(0, 3, step=2)
        assert policy.queue == (1, 0)

    def test_empty_raises(self) -> None:
        """Selecting from an empty queue should raise IndexError."""
        with pytest.raises(IndexError):
            FIFOPolicy().select_victim(FrameSet(1), step=0)


# -- LRU Policy ---------------------------------------------------------------


class TestLRUPolicy:
    """Verify LRU (Least Recently Used) page replacement.

    LRU evicts the page whose last reference is oldest.
    """

    def test_selects_least_recently_used(self) -> None:
        """LRU should pick the page referenced longest ago."""
        policy = LRUPolicy()
        frames = _full_frames(1, 2, 3)
        for step, page in enumerate((1, 2, 3)):
            policy.record_load(step, page, step=step)
        assert policy.select_victim(frames, step=3) == 0

    def test_access_updates_recency(self) -> None:
        """A hit should make the page the most recently used."""
        policy = LRUPolicy()
        frames = _full_frames(1, 2, 3)
        for step, page in enumerate((1, 2, 3)):
            policy.record_load(step, page, step=step)
        policy.record_access(1, step=3)
        # Page 2 (slot 1) is now least recently used
        expected_victim = 1
        assert policy.select_victim(frames, step=4) == expected_victim
        expected_stamp = 3
        assert policy.last_used(1) == expected_stamp

    def test_remove_page_forgets_timestamp(self) -> None:
        """An evicted page's timestamp should be dropped."""
        policy = LRUPolicy()
        policy.record_load(0, 1, step=0)
        policy.remove_page(1, slot=0)
        assert policy.last_used(1) is None

    def test_untracked_pages_lose_ties_to_lowest_slot(self) -> None:
        """Equal (missing) timestamps should resolve to the lowest slot."""
        policy = LRUPolicy()
        frames = _full_frames(4, 5, 6)
        assert policy.select_victim(frames, step=0) == 0

    def test_empty_raises(self) -> None:
        """Selecting with no resident pages should raise IndexError."""
        with pytest.raises(IndexError):
            LRUPolicy().select_victim(FrameSet(2), step=0)


# -- Optimal Policy -----------------------------------------------------------


class TestNextUse:
    """Verify the lookahead helper."""

    def test_distance_within_suffix(self) -> None:
        """Distance counts from the step right after *after*."""
        refs = [1, 2, 3, 1]
        expected = 2
        assert next_use(refs, 1, after=0) == expected

    def test_immediate_next_step_is_zero(self) -> None:
        """A page needed on the very next step is at distance 0."""
        assert next_use([1, 2], 2, after=0) == 0

    def test_never_used_again(self) -> None:
        """A page absent from the suffix yields None."""
        assert next_use([1, 2, 3], 1, after=0) is None

    def test_current_step_not_counted(self) -> None:
        """The reference at *after* itself is not a future use."""
        assert next_use([5, 6], 6, after=1) is None


class TestOptimalPolicy:
    """Verify Belady's MIN replacement.

    Optimal evicts the page used furthest in the future.  A page never
    used again is chosen the moment the scan reaches it.
    """

    def test_evicts_furthest_next_use(self) -> None:
        """The page needed last should be evicted."""
        refs = [1, 2, 3, 4, 2, 3, 1]
        policy = OptimalPolicy(refs)
        frames = _full_frames(1, 2, 3)
        # From step 3: 2 at distance 0, 3 at 1, 1 at 2.
        assert policy.select_victim(frames, step=3) == 0

    def test_first_never_used_wins(self) -> None:
        """Among several never-used pages, the lowest slot is chosen."""
        refs = [1, 2, 3, 4]
        policy = OptimalPolicy(refs)
        frames = _full_frames(1, 2, 3)
        assert policy.select_victim(frames, step=3) == 0

    def test_never_used_overrides_earlier_candidate(self) -> None:
        """A never-used page beats an earlier finite-distance candidate."""
        refs = [1, 2, 3, 4, 2, 1]
        policy = OptimalPolicy(refs)
        frames = _full_frames(1, 2, 3)
        expected_victim = 2
        assert policy.select_victim(frames, step=3) == expected_victim

    def test_hits_do_not_matter(self) -> None:
        """Optimal keeps no history, so hits are ignored."""
        refs = [1, 2, 1, 3, 2]
        policy = OptimalPolicy(refs)
        frames = _full_frames(1, 2)
        policy.record_access(1, step=2)
        # From step 3: 2 is needed next, 1 never again.
        assert policy.select_victim(frames, step=3) == 0

    def test_empty_raises(self) -> None:
        """Selecting with no resident pages should raise IndexError."""
        with pytest.raises(IndexError):
            OptimalPolicy([1]).select_victim(FrameSet(1), step=0)
