"""Fold routed items into per-project entries."""

from __future__ import annotations

import dataclasses
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from ghdigest.events.models import ItemRecord


@dataclasses.dataclass(frozen=True, slots=True)
class RoutedItem:
    """An item record paired with its project key and event time."""

    project: str
    record: ItemRecord
    occurred_at: dt.datetime | None = None


@dataclasses.dataclass(slots=True)
class Aggregation:
    """Mapping of project key to ``{url: title}``.

    URLs are unique within a project; adding a URL again replaces its title.
    Projects and URLs keep the order in which they were first added.
    """

    projects: dict[str, dict[str, str]] = dataclasses.field(default_factory=dict)

    def add(self, project: str, url: str, title: str) -> None:
        """Record ``url`` under ``project``, overwriting any earlier title."""
        self.projects.setdefault(project, {})[url] = title

    def items(self) -> cabc.ItemsView[str, dict[str, str]]:
        """Return ``(project, entries)`` pairs."""
        return self.projects.items()

    def __len__(self) -> int:
        """Return the number of projects."""
        return len(self.projects)


def fold(items: cabc.Iterable[RoutedItem]) -> Aggregation:
    """Fold items into a fresh aggregation; the last title per URL wins."""
    aggregation = Aggregation()
    for item in items:
        aggregation.add(item.project, item.record.url, item.record.title)
    return aggregation


__all__ = ["Aggregation", "RoutedItem", "fold"]
