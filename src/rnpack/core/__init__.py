"""Core building blocks for rnpack."""
