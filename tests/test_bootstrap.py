import pytest

from status_cache.bootstrap import bootstrap
from status_cache.grace_policy import GracePolicy


@pytest.mark.parametrize(
    "freshness_window_s, grace_window_s, should_raise_error",
    [
        # ✅ Defaults
        (300, 30, False),

        # ✅ Grace equal to freshness
        (30, 30, False),

        # ❌ Grace longer than freshness
        (30, 60, True),

        # ❌ Non-positive grace
        (300, 0, True),

        # ❌ Non-positive freshness
        (0, 30, True),
    ],
)
def test_bootstrap_invariants(freshness_window_s, grace_window_s, should_raise_error):
    """Invalid cache policies fail fast at startup"""
    policy = GracePolicy(freshness_window_s=freshness_window_s, grace_window_s=grace_window_s)

    if should_raise_error:
        with pytest.raises(ValueError):
            bootstrap(policy)
    else:
        assert bootstrap(policy) is policy
