"""Shared packages."""
