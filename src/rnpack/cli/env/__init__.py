"""Launch environment commands."""
