"""Private withdrawal stream for the settlement code."""

from typing import Any

from watch_harness.capabilities import Capability
from watch_harness.exceptions import ProbeValidationError
from watch_harness.probes.base import watch_stream
from watch_harness.probes.schemas import TransactionSchema, validate_each

CAPABILITY = Capability.WATCH_WITHDRAWALS


async def probe(exchange: Any, symbol: str, code: str | None = None) -> None:
    def validate(transactions: Any) -> None:
        for transaction in validate_each(TransactionSchema, transactions, CAPABILITY, code):
            if transaction.type not in (None, "withdrawal"):
                raise ProbeValidationError(
                    CAPABILITY.value, code, f"unexpected transaction type {transaction.type}"
                )

    await watch_stream(
        exchange,
        CAPABILITY,
        lambda: exchange.watch_withdrawals(code),
        validate,
        symbol=code,
    )
