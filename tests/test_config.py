"""Tests for configuration management and validation.

Validates HarnessConfig behavior including:
- Safe defaults for the client options
- Document path resolution relative to root_dir
- Opt-in capability extensions parsed from JSON environment values
- Singleton cache behavior
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.settings import HarnessConfig
from watch_harness.capabilities import Capability


class TestHarnessConfigValidation:
    """Test suite for HarnessConfig validation rules."""

    def test_default_values_are_sane(self, mock_config: HarnessConfig) -> None:
        assert mock_config.default_symbol == "BTC/USDT"
        assert mock_config.request_timeout_ms == 20000
        assert mock_config.enable_rate_limit is True
        assert mock_config.public_extensions == []
        assert mock_config.private_extensions == []

    def test_document_paths_resolve_under_root_dir(self, mock_config: HarnessConfig) -> None:
        root = mock_config.root_dir
        assert mock_config.keys_path == root / "keys.json"
        assert mock_config.keys_local_path == root / "keys.local.json"
        assert mock_config.skip_tests_path == root / "skip-tests.json"
        assert mock_config.symbols_path == root / "pro-tests.json"

    def test_absolute_document_path_is_kept(
        self, mock_config: HarnessConfig, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        from config.settings import get_config

        get_config.cache_clear()
        elsewhere = tmp_path / "elsewhere" / "keys.json"
        monkeypatch.setenv("KEYS_FILE", str(elsewhere))

        assert get_config().keys_path == elsewhere

    def test_timeout_bounds(self, mock_config: HarnessConfig, monkeypatch: pytest.MonkeyPatch) -> None:
        from config.settings import get_config

        get_config.cache_clear()
        monkeypatch.setenv("REQUEST_TIMEOUT_MS", "0")
        with pytest.raises(ValidationError):
            get_config()

        get_config.cache_clear()

    def test_path_field_normalization(self, mock_config: HarnessConfig) -> None:
        assert isinstance(mock_config.log_dir, Path)
        assert isinstance(mock_config.root_dir, Path)
        assert isinstance(mock_config.keys_file, Path)


class TestCapabilityExtensions:
    """Test suite for opt-in capability lists."""

    def test_extensions_parse_from_json(
        self, mock_config: HarnessConfig, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from config.settings import get_config

        get_config.cache_clear()
        monkeypatch.setenv("PUBLIC_EXTENSIONS", '["watch_tickers", "watch_status"]')
        monkeypatch.setenv("PRIVATE_EXTENSIONS", '["watch_orders"]')

        config = get_config()

        assert config.public_extensions == [Capability.WATCH_TICKERS, Capability.WATCH_STATUS]
        assert config.private_extensions == [Capability.WATCH_ORDERS]

        get_config.cache_clear()

    @pytest.mark.parametrize(
        "variable,value",
        [
            ("PUBLIC_EXTENSIONS", '["watch_balance"]'),
            ("PRIVATE_EXTENSIONS", '["watch_ticker"]'),
            ("PUBLIC_EXTENSIONS", '["watch_everything"]'),
        ],
    )
    def test_misplaced_or_unknown_capability_rejected(
        self,
        mock_config: HarnessConfig,
        monkeypatch: pytest.MonkeyPatch,
        variable: str,
        value: str,
    ) -> None:
        from config.settings import get_config

        get_config.cache_clear()
        monkeypatch.setenv(variable, value)

        with pytest.raises(ValidationError):
            get_config()

        get_config.cache_clear()


class TestConfigSingletonBehavior:
    """Test suite for get_config() singleton caching."""

    def test_singleton_returns_same_instance(self, mock_config: HarnessConfig) -> None:
        from config.settings import get_config

        assert get_config() is get_config()

    def test_cache_clear_forces_new_instance(
        self, mock_config: HarnessConfig, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from config.settings import get_config

        config1 = get_config()

        get_config.cache_clear()
        monkeypatch.setenv("DEFAULT_SYMBOL", "ETH/BTC")

        config2 = get_config()

        assert config1 is not config2
        assert config2.default_symbol == "ETH/BTC"

        get_config.cache_clear()
