"""Credential and client-configuration resolution.

Settings for one exchange id come from a single credentials document:
``keys.local.json`` when it exists, otherwise ``keys.json``. The local file
replaces the shared one wholesale; the two are never merged.

The identity's sub-mapping is then merged onto the client's own defaults
(the dict returned by ``describe()``): truthy values of keys the client
already defines are deep-extended, everything else is assigned as is. The
result is frozen into an ``ExchangeConfig`` and handed to the client
constructor once.
"""

import json
from pathlib import Path
from typing import Any, Mapping

from ccxt.base.exchange import Exchange
from pydantic import BaseModel, ConfigDict, Field

from config.settings import HarnessConfig, get_config
from watch_harness.exceptions import ConfigFileMissingError
from watch_harness.logger import get_logger

log = get_logger(__name__)

# ccxt rejects more than one websocket proxy setting.
WS_PROXY_KEYS = ("wsProxy", "wssProxy", "wsSocksProxy")


def load_document(path: Path) -> Any:
    """Parse a JSON document.

    Raises:
        ConfigFileMissingError: If the file does not exist.
        json.JSONDecodeError: If the content is not valid JSON.
    """
    if not path.is_file():
        raise ConfigFileMissingError(path)
    return json.loads(path.read_text(encoding="utf-8"))


def select_keys_file(shared: Path, local: Path) -> Path:
    """Return the credentials document to use: local if present, else shared."""
    if local.is_file():
        return local
    if shared.is_file():
        return shared
    raise ConfigFileMissingError(shared, alternatives=[str(local)])


def extract_exchange_settings(document: Any, exchange_id: str) -> dict[str, Any]:
    """Return the sub-mapping for ``exchange_id``, or an empty dict."""
    settings = Exchange.safe_value(document, exchange_id, {}) if isinstance(document, dict) else None
    return dict(settings) if isinstance(settings, dict) else {}


def merge_settings(defaults: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Merge identity overrides onto client defaults.

    Only the override keys appear in the result. Neither input is mutated,
    so merging the same overrides again yields an equal mapping.
    """
    merged: dict[str, Any] = {}
    for key, value in overrides.items():
        if value and key in defaults:
            merged[key] = Exchange.deep_extend(defaults[key], value)
        else:
            merged[key] = value
    return merged


class ExchangeConfig(BaseModel):
    """Immutable constructor configuration for one ccxt.pro client."""

    model_config = ConfigDict(frozen=True)

    exchange_id: str
    timeout_ms: int = Field(..., ge=1)
    enable_rate_limit: bool = True
    http_proxy: str | None = None
    overrides: dict[str, Any] = Field(default_factory=dict)

    def to_options(self) -> dict[str, Any]:
        """Render the mapping passed to the client constructor.

        Overrides win over the harness defaults for timeout and rate limiting.
        """
        options: dict[str, Any] = {
            "enableRateLimit": self.enable_rate_limit,
            "timeout": self.timeout_ms,
        }
        options.update(self.overrides)
        if self.http_proxy:
            options["httpProxy"] = self.http_proxy
            if not any(options.get(key) for key in WS_PROXY_KEYS):
                options["wsProxy"] = self.http_proxy
        return options


class ExchangeSettingsResolver:
    """Resolve the effective settings of one exchange id from disk.

    Attributes:
        config: HarnessConfig with document locations.
    """

    def __init__(self, config: HarnessConfig | None = None) -> None:
        self.config = config or get_config()

    def keys_path(self) -> Path:
        return select_keys_file(self.config.keys_path, self.config.keys_local_path)

    def load_overrides(self, exchange_id: str) -> dict[str, Any]:
        """Read the identity sub-mapping from the winning credentials document."""
        path = self.keys_path()
        overrides = extract_exchange_settings(load_document(path), exchange_id)
        log.debug(
            "Credentials document loaded",
            path=str(path),
            exchange_id=exchange_id,
            keys=sorted(overrides),
        )
        return overrides

    def build(
        self,
        exchange_id: str,
        overrides: Mapping[str, Any],
        defaults: Mapping[str, Any],
    ) -> ExchangeConfig:
        """Merge ``overrides`` onto ``defaults`` and freeze the result."""
        merged = merge_settings(defaults, overrides)
        http_proxy = merged.get("httpProxy") or None
        return ExchangeConfig(
            exchange_id=exchange_id,
            timeout_ms=self.config.request_timeout_ms,
            enable_rate_limit=self.config.enable_rate_limit,
            http_proxy=http_proxy,
            overrides={key: value for key, value in merged.items() if key != "httpProxy"},
        )
