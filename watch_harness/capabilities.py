"""Enumerated streaming capabilities exercised by the harness.

Values are the ccxt snake_case method names; ``has_key`` is the camelCase
key the client publishes in ``exchange.has``.
"""

from enum import Enum


class Capability(str, Enum):
    """One streaming data channel of an exchange client."""

    # Public
    WATCH_ORDER_BOOK = "watch_order_book"
    WATCH_TICKER = "watch_ticker"
    WATCH_TRADES = "watch_trades"
    WATCH_OHLCV = "watch_ohlcv"
    WATCH_STATUS = "watch_status"
    WATCH_HEARTBEAT = "watch_heartbeat"
    WATCH_L2_ORDER_BOOK = "watch_l2_order_book"
    WATCH_ORDER_BOOKS = "watch_order_books"
    WATCH_TICKERS = "watch_tickers"

    # Private
    WATCH_BALANCE = "watch_balance"
    WATCH_ORDERS = "watch_orders"
    WATCH_OPEN_ORDERS = "watch_open_orders"
    WATCH_CLOSED_ORDERS = "watch_closed_orders"
    WATCH_MY_TRADES = "watch_my_trades"
    WATCH_LEDGER = "watch_ledger"
    WATCH_TRANSACTIONS = "watch_transactions"
    WATCH_DEPOSITS = "watch_deposits"
    WATCH_WITHDRAWALS = "watch_withdrawals"

    @property
    def is_private(self) -> bool:
        return self in PRIVATE_CAPABILITIES

    @property
    def has_key(self) -> str:
        """camelCase name used by ``exchange.has``."""
        if self in _HAS_KEY_OVERRIDES:
            return _HAS_KEY_OVERRIDES[self]
        head, *rest = self.value.split("_")
        return head + "".join(part.upper() if part == "ohlcv" else part.title() for part in rest)


PRIVATE_CAPABILITIES = frozenset(
    {
        Capability.WATCH_BALANCE,
        Capability.WATCH_ORDERS,
        Capability.WATCH_OPEN_ORDERS,
        Capability.WATCH_CLOSED_ORDERS,
        Capability.WATCH_MY_TRADES,
        Capability.WATCH_LEDGER,
        Capability.WATCH_TRANSACTIONS,
        Capability.WATCH_DEPOSITS,
        Capability.WATCH_WITHDRAWALS,
    }
)

_HAS_KEY_OVERRIDES = {
    # the aggregated book is served by the regular order book stream
    Capability.WATCH_L2_ORDER_BOOK: "watchOrderBook",
    Capability.WATCH_ORDER_BOOKS: "watchOrderBookForSymbols",
}
