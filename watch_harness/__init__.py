"""watch-harness core package.

This package drives one ccxt.pro exchange client through its streaming API:
- settings_resolver: credential documents and client configuration
- skip_policy: per-exchange exclusion rules
- capabilities / registry: the enumerated capability set and its test units
- probes: one async test unit per streaming capability
- orchestrator: the fixed public/private test plan
- exchange / driver: client lifecycle and the top-level run
- logger / exceptions: logging setup and the exception hierarchy
"""

__version__ = "1.0.0"
