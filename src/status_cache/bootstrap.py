# ─── Project imports ───
from .logger import get_logger
from .grace_policy import GracePolicy


logger = get_logger("bootstrap")


def bootstrap(policy: GracePolicy) -> GracePolicy:
    """
    Validate the cache policy before any cache is built.

    Hard invariant violations raise and abort startup.
    """
    _validate_invariants(policy)
    logger.info(f"Cache policy OK {policy.summary()}")
    return policy

def _validate_invariants(policy: GracePolicy) -> None:
    """
    Validate logical invariants of the cache policy.

    Violations indicate a configuration that cannot behave correctly
    and should fail fast at startup.
    """
    if policy.freshness_window_s <= 0:
        raise ValueError(
            f"FRESHNESS_WINDOW_S must be positive, got {policy.freshness_window_s}"
        )

    if policy.grace_window_s <= 0:
        raise ValueError(
            f"GRACE_WINDOW_S must be positive, got {policy.grace_window_s}"
        )

    # A grace window longer than freshness would serve stale data
    # for longer after a failure than after a success
    if policy.grace_window_s > policy.freshness_window_s:
        raise ValueError(
            "GRACE_WINDOW_S is longer than FRESHNESS_WINDOW_S; "
            "failed refreshes would outlive successful ones"
        )
