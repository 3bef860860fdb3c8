"""Shared watch loop for capability probes.

A probe asks the client for a stream, validates each message and keeps
consuming for ``watch_duration_sec``. At least one message is always
awaited. Capabilities the client does not advertise in ``exchange.has``
are logged and skipped; that is not a failure. Client errors propagate.
"""

from typing import Any, Awaitable, Callable

from config.settings import get_config
from watch_harness.capabilities import Capability
from watch_harness.logger import get_logger

log = get_logger(__name__)


def supports(exchange: Any, capability: Capability) -> bool:
    return bool(exchange.has.get(capability.has_key))


async def watch_stream(
    exchange: Any,
    capability: Capability,
    watch: Callable[[], Awaitable[Any]],
    validate: Callable[[Any], None],
    symbol: str | None = None,
    duration_sec: float | None = None,
) -> Any:
    """Consume one stream and validate every message.

    Args:
        exchange: ccxt.pro client with markets loaded.
        capability: Capability being exercised.
        watch: Zero-argument coroutine factory issuing one watch call.
        validate: Raises on an invalid message.
        symbol: Market symbol, for log context only.
        duration_sec: Override of the configured stream duration.

    Returns:
        The last message received, or None if the capability is unsupported.
    """
    if not supports(exchange, capability):
        log.info(
            "Capability not supported by exchange, skipping",
            exchange_id=exchange.id,
            capability=capability.value,
        )
        return None

    if duration_sec is None:
        duration_sec = get_config().watch_duration_sec
    ends = exchange.milliseconds() + int(duration_sec * 1000)

    log.info("Watching", exchange_id=exchange.id, capability=capability.value, symbol=symbol)

    messages = 0
    while True:
        response = await watch()
        validate(response)
        messages += 1
        if exchange.milliseconds() >= ends:
            break

    log.info(
        "Stream verified",
        exchange_id=exchange.id,
        capability=capability.value,
        symbol=symbol,
        messages=messages,
    )
    return response
