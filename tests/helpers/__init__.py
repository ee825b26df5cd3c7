"""Shared test helpers for rnpack."""
