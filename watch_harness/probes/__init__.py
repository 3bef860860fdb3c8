"""Per-capability test units.

Every ``probe_<capability>.py`` module exports ``probe(exchange, symbol, code=None)``.
Modules are discovered by ``watch_harness.registry.TestRegistry.discover``.
"""
