"""Per-interval byte deltas against the previously persisted totals"""

import logging

from .counter_source import PROC_NET_DEV, ByteState, read_counters
from .state_store import PathLike, load_counter, store_counter

logger = logging.getLogger(__name__)


def reset_safe_sub(current: ByteState, previous: ByteState) -> ByteState:
    """current - previous per field, 0 where the counter went backwards"""
    return current - previous


def sample(
    interface_name: str,
    total_send_path: PathLike,
    total_recv_path: PathLike,
    source_path: str = PROC_NET_DEV,
) -> ByteState:
    """
    Read the interface counters, persist them as the new totals and return
    the change since the totals stored by the previous call.

    ParseError is raised before anything is written. WriteError may leave the
    send total updated and the recv total stale; the next successful call
    rewrites both.
    """
    previous = ByteState(
        received=load_counter(total_recv_path),
        sent=load_counter(total_send_path),
    )

    current = read_counters(interface_name, source_path)

    store_counter(total_send_path, current.sent)
    store_counter(total_recv_path, current.received)

    delta = reset_safe_sub(current, previous)
    if current.received < previous.received or current.sent < previous.sent:
        logger.info(
            f"Counter reset on {interface_name}: previous={previous}, current={current}"
        )
    return delta
