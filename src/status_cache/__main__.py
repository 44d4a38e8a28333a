# --- Standard library imports ---
import sys
import asyncio
import logging
import argparse

# --- Project imports ---
from .config import Config
from .bootstrap import bootstrap
from .status_cache import StatusCache
from .grace_policy import grace_policy
from .errors import StatusCacheError
from .snapshot import default_snapshot_path
from .adapter import PrivilegedContentGate
from .logger import get_logger, setup_logging
from .tristate import TRISTATE_EMOJI
from .clients import AdminStatusClient, RedemptionValidationClient


async def main_loop(cache: StatusCache, gate: PrivilegedContentGate, interval: float):
    """
    Supervisor loop that keeps one status cache warm.

    Each cycle refreshes the cache through its coordinator, logs the gate
    view the UI would render, then sleeps for the refresh interval.
    Unexpected exceptions are logged and the loop continues.
    """

    logger = get_logger("main_loop")

    while True:
        try:
            await cache.refresh()
        except StatusCacheError as e:
            logger.warning(f"Refresh failed: {e}")
        except Exception as e:
            logger.exception(f"Unhandled exception during refresh: {e}")

        view = gate.view()
        logger.info(
            f"{TRISTATE_EMOJI[view.value]} Status [{view.value}] "
            f"show={view.should_show_privileged_content} "
            f"verifying={view.verifying}"
        )
        logger.info(f"💤 Sleeping ... {interval:.2f} s\n")
        await asyncio.sleep(interval)

def build_cache(redeem_code: str | None) -> StatusCache:
    if redeem_code:
        client = RedemptionValidationClient(redeem_code)
        name = "redemption"
    else:
        client = AdminStatusClient()
        name = "admin_status"

    return StatusCache(
        client.fetch,
        policy=grace_policy,
        snapshot_path=default_snapshot_path(name) if Config.SNAPSHOT_ENABLED else None,
        name=name,
    )

async def run(redeem_code: str | None) -> None:
    cache = build_cache(redeem_code)
    async with cache:
        gate = PrivilegedContentGate(cache)
        gate.mount()
        try:
            await main_loop(cache, gate, Config.REFRESH_INTERVAL_S)
        finally:
            gate.unmount()

def main(argv=None):
    """
    Entry point: watch admin status (default) or a redemption code.
    """
    parser = argparse.ArgumentParser(prog="status_cache")
    parser.add_argument("--redeem", metavar="CODE", help="watch a redemption code instead of admin status")
    args = parser.parse_args(argv)

    # Setup logging policy
    setup_logging(level=getattr(logging, Config.LOG_LEVEL))
    logger = get_logger("main")
    logger.info("🚀 Starting status cache supervisor")
    logger.debug(f"Python version: {sys.version}")

    bootstrap(grace_policy)

    try:
        asyncio.run(run(args.redeem))
    except KeyboardInterrupt:
        logger.info("👋 Stopped")

if __name__ == "__main__":
    main()
