"""Per-exchange exclusion rules.

The skip-rules document maps exchange ids to ``{"skip": bool, "skipWs": bool}``.
Either flag excludes the exchange from a streaming run. Evaluation is pure
and must happen before any credentialed or networked call.
"""

from typing import Any, Mapping

SKIP_FLAGS = ("skip", "skipWs")


def skip_entry(rules: Mapping[str, Any], exchange_id: str) -> dict[str, Any]:
    entry = rules.get(exchange_id) if isinstance(rules, Mapping) else None
    return dict(entry) if isinstance(entry, Mapping) else {}


def should_skip(exchange_id: str, rules: Mapping[str, Any]) -> bool:
    """Return True if any skip flag is truthy for ``exchange_id``."""
    entry = skip_entry(rules, exchange_id)
    return any(entry.get(flag) for flag in SKIP_FLAGS)
