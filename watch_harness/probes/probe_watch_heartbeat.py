"""Heartbeat stream; any message that arrives without error passes."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.probes.base import watch_stream

CAPABILITY = Capability.WATCH_HEARTBEAT


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    await watch_stream(exchange, CAPABILITY, lambda: exchange.watch_heartbeat(), lambda _: None)
