import pytest

from status_cache.entry import CacheEntry
from status_cache.tristate import TriState
from status_cache.grace_policy import GraceOutcome, GracePolicy


NOW = 1_000.0
policy = GracePolicy(freshness_window_s=300, grace_window_s=30)


def fresh_entry(value=TriState.TRUE, at=NOW) -> CacheEntry:
    entry = CacheEntry()
    policy.apply_success(entry, value, at)
    return entry


# ===============================
# TEST GROUP: Freshness
# ===============================
@pytest.mark.parametrize(
    "age_s, expected_fresh",
    [
        # ✅ Just fetched
        (0, True),

        # ✅ Inside the window
        (299.9, True),

        # ❌ Window elapsed
        (300, False),
    ],
)
def test_is_fresh(age_s, expected_fresh):
    """Freshness is measured from the last successful fetch"""
    entry = fresh_entry()

    assert policy.is_fresh(entry, NOW + age_s) is expected_fresh


def test_never_fetched_is_not_fresh():
    """An empty entry is never fresh and reports UNKNOWN"""
    entry = CacheEntry()

    assert policy.is_fresh(entry, NOW) is False
    assert policy.visible_value(entry, NOW) is TriState.UNKNOWN


def test_failure_ends_freshness():
    """After a failed refresh the grace window, not freshness, decides"""
    entry = fresh_entry()
    policy.apply_failure(entry, NOW + 10)

    assert policy.is_fresh(entry, NOW + 11) is False
    assert policy.visible_value(entry, NOW + 11) is TriState.TRUE
    assert policy.visible_value(entry, NOW + 41) is TriState.UNKNOWN


# ===============================
# TEST GROUP: Success transitions
# ===============================
def test_success_clears_grace():
    """A success overwrites last known good and clears grace bookkeeping"""
    entry = fresh_entry(TriState.TRUE)
    policy.apply_failure(entry, NOW + 400)
    policy.apply_failure(entry, NOW + 410)
    assert entry.grace_extended is True

    policy.apply_success(entry, TriState.FALSE, NOW + 420)

    assert entry.value is TriState.FALSE
    assert entry.last_known_good is TriState.FALSE
    assert entry.fetched_at == NOW + 420
    assert entry.grace_deadline is None
    assert entry.grace_extended is False


# ===============================
# TEST GROUP: Failure transitions
# ===============================
def test_failure_without_last_known_good():
    """No fallback: value is UNKNOWN and no grace window opens"""
    entry = CacheEntry()

    outcome = policy.apply_failure(entry, NOW)

    assert outcome is GraceOutcome.NO_FALLBACK
    assert entry.value is TriState.UNKNOWN
    assert entry.grace_deadline is None


@pytest.mark.parametrize("last_known", [TriState.TRUE, TriState.FALSE])
def test_first_failure_opens_grace(last_known):
    """First failure after a success opens the window and keeps last known good"""
    entry = fresh_entry(last_known)

    outcome = policy.apply_failure(entry, NOW + 400)

    assert outcome is GraceOutcome.OPENED
    assert outcome.serving_last_known_good
    assert entry.grace_deadline == NOW + 430
    assert entry.last_known_good is last_known
    assert policy.visible_value(entry, NOW + 430) is last_known


def test_grace_extends_once_without_stacking():
    """Second failure in grace extends once; later failures leave the deadline alone"""
    entry = fresh_entry()

    assert policy.apply_failure(entry, NOW + 400) is GraceOutcome.OPENED
    assert policy.apply_failure(entry, NOW + 420) is GraceOutcome.EXTENDED
    assert entry.grace_deadline == NOW + 450

    assert policy.apply_failure(entry, NOW + 440) is GraceOutcome.HELD
    assert entry.grace_deadline == NOW + 450


def test_failure_after_grace_lapsed_does_not_reopen():
    """Once the window has closed, failures degrade the value to UNKNOWN"""
    entry = fresh_entry()
    policy.apply_failure(entry, NOW + 400)

    outcome = policy.apply_failure(entry, NOW + 431)

    assert outcome is GraceOutcome.LAPSED
    assert not outcome.serving_last_known_good
    assert entry.value is TriState.UNKNOWN
    assert entry.last_known_good is TriState.TRUE   # never cleared by failure
    assert policy.visible_value(entry, NOW + 431) is TriState.UNKNOWN


@pytest.mark.parametrize(
    "offset_s, expected_in_grace, expected_expired",
    [
        # ✅ Right after the failure
        (0, True, False),

        # ✅ Exactly at the deadline
        (30, True, False),

        # ❌ Past the deadline
        (30.001, False, True),
    ],
)
def test_grace_boundaries(offset_s, expected_in_grace, expected_expired):
    """Grace holds while now <= deadline and lapses strictly after it"""
    entry = fresh_entry()
    policy.apply_failure(entry, NOW + 400)

    assert policy.in_grace(entry, NOW + 400 + offset_s) is expected_in_grace
    assert policy.grace_expired(entry, NOW + 400 + offset_s) is expected_expired


def test_summary():
    assert policy.summary() == {"freshness_window_s": 300, "grace_window_s": 30}
