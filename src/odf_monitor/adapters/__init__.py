"""Adapters - implementations of ports."""
