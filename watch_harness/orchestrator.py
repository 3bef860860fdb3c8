"""Fixed test plan for one exchange client.

The plan is linear: public phase, credential gate, private phase. Every
step is awaited before the next one starts and any exception ends the run;
there is no per-capability isolation.

Currency-scoped streams (ledger, deposits, withdrawals) use a settlement
code: the first entry of ``SETTLEMENT_CODES`` the exchange lists.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from config.settings import HarnessConfig, get_config
from watch_harness.capabilities import Capability
from watch_harness.logger import get_logger
from watch_harness.registry import TestRegistry

log = get_logger(__name__)

SETTLEMENT_CODES: tuple[str, ...] = (
    "BTC",
    "ETH",
    "XRP",
    "LTC",
    "BCH",
    "EOS",
    "BNB",
    "BSV",
    "USDT",
    "ATOM",
    "BAT",
    "BTG",
    "DASH",
    "DOGE",
    "ETC",
    "IOTA",
    "LSK",
    "MKR",
    "NEO",
    "PAX",
    "QTUM",
    "TRX",
    "TUSD",
    "USD",
    "USDC",
    "WAVES",
    "XEM",
    "XMR",
    "ZEC",
    "ZRX",
)

# Symbols of deactivated/delisted instruments carry this marker.
DELISTED_MARKER = ".d"

DEFAULT_PUBLIC_PLAN: tuple[Capability, ...] = (
    Capability.WATCH_ORDER_BOOK,
    Capability.WATCH_TICKER,
    Capability.WATCH_TRADES,
    Capability.WATCH_OHLCV,
)

DEFAULT_PRIVATE_PLAN: tuple[Capability, ...] = (
    Capability.WATCH_BALANCE,
    Capability.WATCH_MY_TRADES,
)


def select_settlement_code(
    currencies: Mapping[str, Any] | Iterable[str] | None,
    priorities: Sequence[str] = SETTLEMENT_CODES,
) -> str:
    """Return the first priority code the exchange lists, else the first priority."""
    available = currencies or {}
    for code in priorities:
        if code in available:
            return code
    return priorities[0]


def is_delisted(symbol: str) -> bool:
    return DELISTED_MARKER in symbol


@dataclass(frozen=True)
class TestPlan:
    """Ordered capabilities of the public and private phases."""

    __test__ = False  # not a pytest test class

    public: tuple[Capability, ...] = DEFAULT_PUBLIC_PLAN
    private: tuple[Capability, ...] = DEFAULT_PRIVATE_PLAN

    @classmethod
    def from_config(cls, config: HarnessConfig) -> "TestPlan":
        """Default plan followed by the configured opt-in extensions."""
        return cls(
            public=_extend(DEFAULT_PUBLIC_PLAN, config.public_extensions),
            private=_extend(DEFAULT_PRIVATE_PLAN, config.private_extensions),
        )


def _extend(
    plan: tuple[Capability, ...], extensions: Iterable[Capability]
) -> tuple[Capability, ...]:
    extended = list(plan)
    for capability in extensions:
        if capability not in extended:
            extended.append(capability)
    return tuple(extended)


@dataclass(frozen=True)
class RunContext:
    """Per-run values shared by the driver and the orchestrator."""

    exchange_id: str
    symbol: str
    verbose: bool = False


class Orchestrator:
    """Drive the test plan against one market-loaded exchange client.

    Attributes:
        registry: Capability to test unit mapping.
        plan: Ordered public and private capabilities.
    """

    def __init__(
        self,
        registry: TestRegistry,
        plan: TestPlan | None = None,
        config: HarnessConfig | None = None,
    ) -> None:
        self.registry = registry
        self.plan = plan or TestPlan.from_config(config or get_config())

    async def run(self, exchange: Any, context: RunContext) -> str:
        """Execute the plan and return the settlement code used."""
        code = select_settlement_code(exchange.currencies)
        symbol = context.symbol

        log.info("CODE: {}", code, exchange_id=context.exchange_id)
        log.info("SYMBOL: {}", symbol, exchange_id=context.exchange_id)

        if is_delisted(symbol):
            log.warning(
                "Symbol is marked as delisted, no capability tested",
                exchange_id=context.exchange_id,
                symbol=symbol,
            )
            return code

        await self.run_public(exchange, symbol, code)
        await self.run_private(exchange, symbol, code)
        return code

    async def run_public(self, exchange: Any, symbol: str, code: str) -> None:
        await self._run_phase("public", self.plan.public, exchange, symbol, code)

    async def run_private(self, exchange: Any, symbol: str, code: str) -> None:
        # local check of configured keys, not a network call
        if not exchange.check_required_credentials(False):
            log.info(
                "Credentials missing or incomplete, private phase skipped",
                exchange_id=exchange.id,
            )
            return
        await self._run_phase("private", self.plan.private, exchange, symbol, code)

    async def _run_phase(
        self,
        phase: str,
        capabilities: Sequence[Capability],
        exchange: Any,
        symbol: str,
        code: str,
    ) -> None:
        log.info("Phase started", phase=phase, capabilities=[c.value for c in capabilities])
        for capability in capabilities:
            await self.registry[capability](exchange, symbol, code)
        log.info("Phase completed", phase=phase)
