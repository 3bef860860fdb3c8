"""Global configuration management using pydantic-settings.

This module loads harness settings from environment variables (and an
optional .env file) with strict type validation. The file-based documents
consumed by a run (credentials, skip rules, default symbols) are located
relative to ``root_dir``.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from watch_harness.capabilities import Capability


class HarnessConfig(BaseSettings):
    """Centralized configuration with environment variable binding.

    Attributes:
        app_name: Application identifier for logging.
        debug: Enable loguru backtrace/diagnose output.
        log_level: Minimum log level for output filtering.
        log_dir: Directory for per-exchange JSON log files.
        root_dir: Directory holding the JSON documents below.
        symbols_file: Default-symbol table (exchange id -> symbol).
        keys_file: Shared credentials document.
        keys_local_file: Local credentials document, replaces keys_file if present.
        skip_tests_file: Skip-rules document.
        default_symbol: Fallback symbol when neither CLI nor table provide one.
        request_timeout_ms: Client request timeout in milliseconds.
        enable_rate_limit: Toggle the client's built-in rate limiter.
        watch_duration_sec: How long each probe keeps consuming a stream.
        public_extensions: Opt-in public capabilities appended to the default plan.
        private_extensions: Opt-in private capabilities appended to the default plan.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Metadata
    app_name: str = Field(default="watch-harness", description="Application identifier")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    log_dir: Path = Field(default=Path("logs"), description="Log output directory")

    # Documents
    root_dir: Path = Field(default=Path("."), description="Directory of the JSON documents")
    symbols_file: Path = Field(
        default=Path("pro-tests.json"), description="Default-symbol table"
    )
    keys_file: Path = Field(default=Path("keys.json"), description="Shared credentials")
    keys_local_file: Path = Field(
        default=Path("keys.local.json"), description="Local credentials override"
    )
    skip_tests_file: Path = Field(
        default=Path("skip-tests.json"), description="Skip-rules document"
    )

    # Exchange Client
    default_symbol: str = Field(default="BTC/USDT", min_length=1, description="Fallback symbol")
    request_timeout_ms: int = Field(
        default=20000, ge=1000, le=300000, description="Request timeout in milliseconds"
    )
    enable_rate_limit: bool = Field(default=True, description="Client-side rate limiting")

    # Test Plan
    watch_duration_sec: float = Field(
        default=10.0, ge=0.0, le=600.0, description="Per-probe stream duration"
    )
    public_extensions: list[Capability] = Field(
        default_factory=list, description="Opt-in public capabilities"
    )
    private_extensions: list[Capability] = Field(
        default_factory=list, description="Opt-in private capabilities"
    )

    @field_validator(
        "log_dir",
        "root_dir",
        "symbols_file",
        "keys_file",
        "keys_local_file",
        "skip_tests_file",
        mode="before",
    )
    @classmethod
    def ensure_path(cls, value: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return Path(value) if isinstance(value, str) else value

    @field_validator("public_extensions")
    @classmethod
    def validate_public_extensions(cls, value: list[Capability]) -> list[Capability]:
        """Reject private capabilities in the public phase."""
        private = [capability.value for capability in value if capability.is_private]
        if private:
            raise ValueError(f"Private capabilities cannot run in the public phase: {private}")
        return value

    @field_validator("private_extensions")
    @classmethod
    def validate_private_extensions(cls, value: list[Capability]) -> list[Capability]:
        """Reject public capabilities in the private phase."""
        public = [capability.value for capability in value if not capability.is_private]
        if public:
            raise ValueError(f"Public capabilities cannot run in the private phase: {public}")
        return value

    def _document(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root_dir / path

    @property
    def symbols_path(self) -> Path:
        return self._document(self.symbols_file)

    @property
    def keys_path(self) -> Path:
        return self._document(self.keys_file)

    @property
    def keys_local_path(self) -> Path:
        return self._document(self.keys_local_file)

    @property
    def skip_tests_path(self) -> Path:
        return self._document(self.skip_tests_file)


@lru_cache(maxsize=1)
def get_config() -> HarnessConfig:
    """Retrieve the singleton HarnessConfig instance.

    Returns:
        HarnessConfig: The validated configuration instance.
    """
    return HarnessConfig()
