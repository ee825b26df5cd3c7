"""Packager lifecycle commands."""
