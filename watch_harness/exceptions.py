"""Custom exception hierarchy for watch-harness.

Each exception carries a context mapping so the top-level handler in
``main.py`` can log it as structured data. Skip conditions are not errors
and never raise; they are reported as ``Skipped`` outcomes.
"""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any


class HarnessError(Exception):
    """Base exception for all watch-harness errors.

    Attributes:
        message: Human-readable error description.
        context: Optional dictionary with additional debugging information.
        timestamp: UTC timestamp when the exception was raised.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now(UTC)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format exception message with context for logging."""
        base = f"[{self.timestamp.isoformat()}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} | Context: {context_str}"
        return base


class ConfigFileMissingError(HarnessError):
    """Raised when a required JSON document does not exist.

    The run cannot proceed without credentials, skip rules and the
    default-symbol table, so this is always fatal.
    """

    def __init__(self, path: Path | str, alternatives: list[str] | None = None) -> None:
        super().__init__(
            message=f"Required configuration file '{path}' not found",
            context={"path": str(path), "alternatives": alternatives or []},
        )
        self.path = Path(path)


class UnknownExchangeError(HarnessError):
    """Raised when the exchange id has no streaming implementation in ccxt.pro."""

    def __init__(self, exchange_id: str) -> None:
        super().__init__(
            message=f"Exchange '{exchange_id}' is not available in ccxt.pro",
            context={"exchange_id": exchange_id},
        )
        self.exchange_id = exchange_id


class CapabilityRegistrationError(HarnessError):
    """Raised when probe discovery does not line up with the capability set.

    Covers probe modules named after an unknown capability, modules that
    do not export a callable ``probe`` and capabilities left without a probe.
    """

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(
            message=f"Cannot register capability '{name}': {reason}",
            context={"capability": name, "reason": reason},
        )
        self.name = name


class ProbeValidationError(HarnessError):
    """Raised when a streamed payload fails structural validation."""

    def __init__(self, capability: str, symbol: str | None, reason: str) -> None:
        super().__init__(
            message=f"{capability} returned an invalid payload: {reason}",
            context={"capability": capability, "symbol": symbol, "reason": reason},
        )
        self.capability = capability
        self.symbol = symbol


class LoggingInitializationError(HarnessError):
    """Raised when the logging system fails to initialize.

    This is a startup-blocking error - the application cannot proceed
    without a functioning logging infrastructure.
    """

    def __init__(self, log_dir: str, reason: str) -> None:
        super().__init__(
            message=f"Failed to initialize logging at '{log_dir}': {reason}",
            context={"log_dir": log_dir, "reason": reason},
        )
