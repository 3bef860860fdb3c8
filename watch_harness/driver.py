"""Top-level lifecycle of one harness run.

Order of operations:
    1. Resolve the symbol (CLI > default-symbol table > fallback).
    2. Resolve credentials and evaluate the skip rules, before any client
       exists, so a skipped exchange never touches the network.
    3. Open the client; aliases of another exchange are not tested twice.
    4. Load markets, apply verbosity, run the orchestrator once.

Every path ends in a ``RunOutcome``; the process exit status is decided
by ``main.py``.
"""

from datetime import UTC, datetime
from typing import Any, Mapping

from config.settings import HarnessConfig, get_config
from watch_harness.exchange import ExchangeFactory
from watch_harness.logger import get_logger
from watch_harness.orchestrator import Orchestrator, RunContext
from watch_harness.outcome import Completed, Failed, RunOutcome, Skipped
from watch_harness.registry import TestRegistry
from watch_harness.settings_resolver import ExchangeSettingsResolver, load_document
from watch_harness.skip_policy import should_skip

log = get_logger(__name__)


def resolve_symbol(
    exchange_id: str,
    cli_symbol: str | None,
    symbols: Mapping[str, Any],
    fallback: str,
) -> str:
    """Pick the trading symbol: explicit argument, then table entry, then fallback."""
    if cli_symbol:
        return cli_symbol
    table_symbol = symbols.get(exchange_id) if isinstance(symbols, Mapping) else None
    return table_symbol or fallback


class RunDriver:
    """Run the harness once for one exchange id.

    Attributes:
        config: HarnessConfig with document locations and client options.
        factory: Builds and closes the ccxt.pro client.
        resolver: Loads credential overrides.
    """

    def __init__(
        self,
        config: HarnessConfig | None = None,
        factory: ExchangeFactory | None = None,
        registry: TestRegistry | None = None,
    ) -> None:
        self.config = config or get_config()
        self.factory = factory or ExchangeFactory()
        self.resolver = ExchangeSettingsResolver(self.config)
        self._registry = registry

    @property
    def registry(self) -> TestRegistry:
        if self._registry is None:
            self._registry = TestRegistry.discover()
        return self._registry

    async def run(
        self,
        exchange_id: str | None,
        cli_symbol: str | None = None,
        verbose: bool = False,
    ) -> RunOutcome:
        """Execute the run; exceptions are returned as ``Failed``."""
        if not exchange_id:
            log.warning("Exchange id not specified")
            return Skipped(reason="Exchange id not specified")

        try:
            return await self._run(exchange_id, cli_symbol, verbose)
        except Exception as exc:
            return Failed(error=exc)

    async def _run(self, exchange_id: str, cli_symbol: str | None, verbose: bool) -> RunOutcome:
        symbols = load_document(self.config.symbols_path)
        symbol = resolve_symbol(exchange_id, cli_symbol, symbols, self.config.default_symbol)
        log.info("TESTING", exchange_id=exchange_id, symbol=symbol)

        overrides = self.resolver.load_overrides(exchange_id)
        skip_rules = load_document(self.config.skip_tests_path)
        if should_skip(exchange_id, skip_rules):
            log.error("[Skipped] exchange {}", exchange_id, exchange_id=exchange_id)
            return Skipped(reason=f"{exchange_id} is excluded by the skip rules")

        orchestrator = Orchestrator(self.registry, config=self.config)
        defaults = self.factory.defaults(exchange_id)
        exchange_config = self.resolver.build(exchange_id, overrides, defaults)
        context = RunContext(exchange_id=exchange_id, symbol=symbol, verbose=verbose)

        async with self.factory.open(exchange_config) as exchange:
            if exchange.alias:
                log.info("Skipped alias", exchange_id=exchange_id)
                return Skipped(reason=f"{exchange_id} is an alias")

            await exchange.load_markets()
            exchange.verbose = context.verbose
            await orchestrator.run(exchange, context)

        finished_at = datetime.now(UTC)
        log.info("Done.", exchange_id=exchange_id, finished_at=finished_at.isoformat())
        return Completed(finished_at=finished_at)
