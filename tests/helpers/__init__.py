"""Shared builders for digest tests."""
