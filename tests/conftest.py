"""Pytest configuration and shared fixtures for the watch-harness test suite.

This module provides hermetic test infrastructure:
- No network access: the exchange client and its factory are fakes
- Isolated configuration: environment variables point at tmp_path documents
- Recording test units so call order can be asserted exactly
"""

import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Callable

import pytest

from config.settings import HarnessConfig
from watch_harness.capabilities import Capability
from watch_harness.registry import TestRegistry
from watch_harness.settings_resolver import ExchangeConfig


@pytest.fixture
def mock_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> HarnessConfig:
    """Provide isolated HarnessConfig rooted in tmp_path.

    Clears the lru_cache singleton before and after the test.
    """
    from config.settings import get_config

    get_config.cache_clear()

    root_dir = tmp_path / "root"
    log_dir = tmp_path / "logs"
    root_dir.mkdir()

    test_env = {
        "APP_NAME": "watch-harness-test",
        "DEBUG": "false",
        "LOG_LEVEL": "DEBUG",
        "LOG_DIR": str(log_dir),
        "ROOT_DIR": str(root_dir),
        "SYMBOLS_FILE": "pro-tests.json",
        "KEYS_FILE": "keys.json",
        "KEYS_LOCAL_FILE": "keys.local.json",
        "SKIP_TESTS_FILE": "skip-tests.json",
        "DEFAULT_SYMBOL": "BTC/USDT",
        "REQUEST_TIMEOUT_MS": "20000",
        "ENABLE_RATE_LIMIT": "true",
        "WATCH_DURATION_SEC": "0",
        "PUBLIC_EXTENSIONS": "[]",
        "PRIVATE_EXTENSIONS": "[]",
    }

    for key, value in test_env.items():
        monkeypatch.setenv(key, value)

    config = get_config()

    yield config

    get_config.cache_clear()


@pytest.fixture
def write_document(mock_config: HarnessConfig) -> Callable[[str, Any], Path]:
    """Factory fixture writing a JSON document into the configured root_dir.

    Example:
        write_document("keys.json", {"kraken": {"apiKey": "key"}})
    """

    def _write(name: str, content: Any) -> Path:
        path = mock_config.root_dir / name
        path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def documents(write_document: Callable[[str, Any], Path]) -> dict[str, Path]:
    """Default document set: kraken with credentials, no skip rules."""
    return {
        "symbols": write_document("pro-tests.json", {"kraken": "BTC/USDT"}),
        "keys": write_document("keys.json", {"kraken": {"apiKey": "key", "secret": "secret"}}),
        "skip": write_document("skip-tests.json", {}),
    }


class FakeExchange:
    """Stand-in for a ccxt.pro client that records lifecycle calls."""

    def __init__(
        self,
        calls: list[str],
        exchange_id: str = "kraken",
        alias: bool = False,
        credentials: bool = True,
        currencies: dict[str, Any] | None = None,
    ) -> None:
        self.id = exchange_id
        self.alias = alias
        self.verbose = False
        self.has: dict[str, Any] = {}
        self.timeframes = {"1m": "1", "1h": "60"}
        self.currencies = currencies if currencies is not None else {"BTC": {}, "USD": {}}
        self.closed = False
        self._calls = calls
        self._credentials = credentials

    async def load_markets(self) -> dict[str, Any]:
        self._calls.append("load_markets")
        return {}

    def check_required_credentials(self, error: bool = True) -> bool:
        self._calls.append("check_credentials")
        return self._credentials

    def milliseconds(self) -> int:
        return 0

    async def close(self) -> None:
        self.closed = True


class FakeExchangeFactory:
    """ExchangeFactory replacement yielding a prepared FakeExchange."""

    def __init__(self, exchange: FakeExchange, defaults: dict[str, Any] | None = None) -> None:
        self.exchange = exchange
        self.opened: list[ExchangeConfig] = []
        self.described: list[str] = []
        self._defaults = defaults or {
            "options": {"defaultType": "spot", "watchOrderBook": {"depth": 10}},
            "timeout": 10000,
        }

    def defaults(self, exchange_id: str) -> dict[str, Any]:
        self.described.append(exchange_id)
        return self._defaults

    @asynccontextmanager
    async def open(self, config: ExchangeConfig) -> AsyncGenerator[FakeExchange, None]:
        self.opened.append(config)
        try:
            yield self.exchange
        finally:
            await self.exchange.close()


@pytest.fixture
def call_log() -> list[str]:
    """Ordered record of exchange and test-unit calls."""
    return []


@pytest.fixture
def probe_args() -> list[tuple[str, str, str | None]]:
    """(capability, symbol, code) for every recorded test-unit call."""
    return []


@pytest.fixture
def recording_registry(
    call_log: list[str], probe_args: list[tuple[str, str, str | None]]
) -> TestRegistry:
    """Registry whose units only record that they ran."""

    def _unit(capability: Capability) -> Callable[..., Any]:
        async def unit(exchange: Any, symbol: str, code: str | None = None) -> None:
            call_log.append(capability.value)
            probe_args.append((capability.value, symbol, code))

        return unit

    return TestRegistry({capability: _unit(capability) for capability in Capability})


@pytest.fixture
def fake_exchange(call_log: list[str]) -> FakeExchange:
    return FakeExchange(call_log)


@pytest.fixture
def fake_factory(fake_exchange: FakeExchange) -> FakeExchangeFactory:
    return FakeExchangeFactory(fake_exchange)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests requiring full stack",
    )
