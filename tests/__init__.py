"""Test suite for watch-harness.

Hermetic tests: the exchange client is always a fake and every document
lives under tmp_path.
"""
