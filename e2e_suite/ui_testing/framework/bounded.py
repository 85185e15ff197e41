"""
Bounded teardown operations.

`run_bounded` awaits a non-critical operation under a deadline. Neither the
deadline nor an error raised by the operation propagates: both are logged and
reported through the return value, so a hanging browser cannot keep the
process from finishing.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable

from loguru import logger


async def run_bounded(
    operation: Awaitable,
    timeout_ms: int,
    description: str,
) -> bool:
    """
    Await `operation`, giving up after `timeout_ms` milliseconds.

    Args:
        operation: Awaitable to run (cancelled when the deadline passes)
        timeout_ms: Deadline in milliseconds
        description: Human-readable name for log messages

    Returns:
        True if the operation completed in time, False on timeout or error
    """
    try:
        await asyncio.wait_for(operation, timeout=timeout_ms / 1000)
    except asyncio.TimeoutError:
        logger.error(f"{description} timed out after {timeout_ms} ms")
        return False
    except Exception as e:
        logger.error(f"Unexpected error during {description}: {e}")
        return False
    return True


__all__ = ["run_bounded"]
