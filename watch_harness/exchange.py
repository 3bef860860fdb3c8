"""ccxt.pro client lifecycle.

The factory resolves an exchange id to its streaming class, exposes the
class defaults that credential overrides are merged onto, and opens a
configured client as an async context manager that always closes it.
"""

from contextlib import asynccontextmanager
from types import ModuleType
from typing import Any, AsyncGenerator

import ccxt.pro

from watch_harness.exceptions import UnknownExchangeError
from watch_harness.logger import get_logger
from watch_harness.settings_resolver import ExchangeConfig

log = get_logger(__name__)


class ExchangeFactory:
    """Build ccxt.pro clients from immutable configuration.

    Attributes:
        namespace: Module holding the exchange classes (``ccxt.pro`` by default).

    Example:
        factory = ExchangeFactory()
        async with factory.open(exchange_config) as exchange:
            await exchange.load_markets()
    """

    def __init__(self, namespace: ModuleType | Any = ccxt.pro) -> None:
        self.namespace = namespace

    def resolve(self, exchange_id: str) -> type:
        """Return the streaming client class for ``exchange_id``.

        Raises:
            UnknownExchangeError: If ccxt.pro has no such exchange.
        """
        exchanges = getattr(self.namespace, "exchanges", None)
        if exchanges is not None and exchange_id not in exchanges:
            raise UnknownExchangeError(exchange_id)
        exchange_class = getattr(self.namespace, exchange_id, None)
        if not isinstance(exchange_class, type):
            raise UnknownExchangeError(exchange_id)
        return exchange_class

    def defaults(self, exchange_id: str) -> dict[str, Any]:
        """Return the client's built-in settings (its ``describe()`` mapping).

        Constructing a client performs no network I/O.
        """
        return dict(self.resolve(exchange_id)().describe())

    @asynccontextmanager
    async def open(self, config: ExchangeConfig) -> AsyncGenerator[Any, None]:
        """Construct the client once from ``config`` and close it on exit."""
        exchange_class = self.resolve(config.exchange_id)
        exchange = exchange_class(config.to_options())
        log.debug(
            "Exchange client created",
            exchange_id=config.exchange_id,
            timeout_ms=config.timeout_ms,
            enable_rate_limit=config.enable_rate_limit,
            proxy=bool(config.http_proxy),
        )
        try:
            yield exchange
        finally:
            await exchange.close()
            log.debug("Exchange client closed", exchange_id=config.exchange_id)
