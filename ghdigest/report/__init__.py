"""Aggregation and rendering of digest reports."""

from __future__ import annotations

from .aggregate import Aggregation, RoutedItem, fold
from .render import render_report, resolve_public_url

__all__ = ["Aggregation", "RoutedItem", "fold", "render_report", "resolve_public_url"]
