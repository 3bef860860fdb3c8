"""Tests for the fixed test plan.

Verifies settlement-code selection, the delisting guard, phase ordering,
the credential gate and error propagation.
"""

from typing import Any

import pytest
from hypothesis import given, strategies as st

from config.settings import HarnessConfig
from tests.conftest import FakeExchange
from watch_harness.capabilities import Capability
from watch_harness.orchestrator import (
    SETTLEMENT_CODES,
    Orchestrator,
    RunContext,
    TestPlan,
    is_delisted,
    select_settlement_code,
)
from watch_harness.registry import TestRegistry

PUBLIC_SEQUENCE = ["watch_order_book", "watch_ticker", "watch_trades", "watch_ohlcv"]
PRIVATE_SEQUENCE = ["watch_balance", "watch_my_trades"]


class TestSettlementCode:
    def test_first_listed_priority_wins(self) -> None:
        assert select_settlement_code({"ETH": {}, "USDC": {}}) == "ETH"

    def test_accepts_plain_sets(self) -> None:
        assert select_settlement_code({"USDC", "ZRX"}) == "USDC"

    @pytest.mark.parametrize("currencies", [{}, None, {"FOO": {}}])
    def test_falls_back_to_first_priority(self, currencies: Any) -> None:
        assert select_settlement_code(currencies) == "BTC"

    @given(currencies=st.sets(st.sampled_from(SETTLEMENT_CODES) | st.text(max_size=5)))
    def test_always_returns_a_priority_code(self, currencies: set[str]) -> None:
        code = select_settlement_code(currencies)

        assert code in SETTLEMENT_CODES
        listed = [c for c in SETTLEMENT_CODES if c in currencies]
        assert code == (listed[0] if listed else SETTLEMENT_CODES[0])


class TestDelistingGuard:
    @pytest.mark.parametrize(
        "symbol,expected",
        [("BTC/USDT.d", True), ("XBT.d/USD", True), ("BTC/USDT", False), ("BTC/USD:BTC", False)],
    )
    def test_marker_detection(self, symbol: str, expected: bool) -> None:
        assert is_delisted(symbol) is expected


class TestTestPlan:
    def test_default_plan(self) -> None:
        plan = TestPlan()

        assert [c.value for c in plan.public] == PUBLIC_SEQUENCE
        assert [c.value for c in plan.private] == PRIVATE_SEQUENCE

    def test_extensions_are_appended_once(
        self, mock_config: HarnessConfig, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from config.settings import get_config

        get_config.cache_clear()
        monkeypatch.setenv("PUBLIC_EXTENSIONS", '["watch_tickers", "watch_ticker", "watch_tickers"]')
        monkeypatch.setenv("PRIVATE_EXTENSIONS", '["watch_orders"]')

        plan = TestPlan.from_config(get_config())

        assert [c.value for c in plan.public] == PUBLIC_SEQUENCE + ["watch_tickers"]
        assert [c.value for c in plan.private] == PRIVATE_SEQUENCE + ["watch_orders"]

        get_config.cache_clear()


class TestOrchestratorRun:
    @pytest.mark.asyncio
    async def test_public_then_gate_then_private(
        self,
        mock_config: HarnessConfig,
        recording_registry: TestRegistry,
        call_log: list[str],
        probe_args: list[tuple[str, str, str | None]],
    ) -> None:
        exchange = FakeExchange(call_log, currencies={"ETH": {}, "USDC": {}})

        code = await Orchestrator(recording_registry, TestPlan()).run(
            exchange, RunContext(exchange_id="kraken", symbol="ETH/USDC")
        )

        assert code == "ETH"
        assert call_log == PUBLIC_SEQUENCE + ["check_credentials"] + PRIVATE_SEQUENCE
        assert all(args[1:] == ("ETH/USDC", "ETH") for args in probe_args)

    @pytest.mark.asyncio
    async def test_private_phase_skipped_without_credentials(
        self, recording_registry: TestRegistry, call_log: list[str]
    ) -> None:
        exchange = FakeExchange(call_log, credentials=False)

        await Orchestrator(recording_registry, TestPlan()).run(
            exchange, RunContext(exchange_id="kraken", symbol="BTC/USDT")
        )

        assert call_log == PUBLIC_SEQUENCE + ["check_credentials"]

    @pytest.mark.asyncio
    async def test_delisted_symbol_runs_no_phase(
        self, recording_registry: TestRegistry, call_log: list[str]
    ) -> None:
        exchange = FakeExchange(call_log)

        await Orchestrator(recording_registry, TestPlan()).run(
            exchange, RunContext(exchange_id="kraken", symbol="BTC/USDT.d")
        )

        assert call_log == []

    @pytest.mark.asyncio
    async def test_failure_stops_the_plan(
        self, recording_registry: TestRegistry, call_log: list[str]
    ) -> None:
        async def broken(exchange: Any, symbol: str, code: str | None = None) -> None:
            call_log.append("watch_ticker")
            raise RuntimeError("stream closed")

        units = dict(recording_registry)
        units[Capability.WATCH_TICKER] = broken
        exchange = FakeExchange(call_log)

        with pytest.raises(RuntimeError, match="stream closed"):
            await Orchestrator(TestRegistry(units), TestPlan()).run(
                exchange, RunContext(exchange_id="kraken", symbol="BTC/USDT")
            )

        assert call_log == ["watch_order_book", "watch_ticker"]

    @pytest.mark.asyncio
    async def test_configured_extensions_run_after_defaults(
        self,
        recording_registry: TestRegistry,
        call_log: list[str],
    ) -> None:
        plan = TestPlan(
            public=TestPlan().public + (Capability.WATCH_STATUS,),
            private=TestPlan().private + (Capability.WATCH_LEDGER,),
        )
        exchange = FakeExchange(call_log)

        await Orchestrator(recording_registry, plan).run(
            exchange, RunContext(exchange_id="kraken", symbol="BTC/USDT")
        )

        assert call_log == (
            PUBLIC_SEQUENCE
            + ["watch_status", "check_credentials"]
            + PRIVATE_SEQUENCE
            + ["watch_ledger"]
        )
