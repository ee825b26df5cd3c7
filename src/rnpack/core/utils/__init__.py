"""Shared utilities for rnpack."""
