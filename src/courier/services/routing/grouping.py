"""Cluster stops that share a postal code."""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from ...models.domain import Waypoint


def group_by_code(waypoints: Sequence[Waypoint]) -> list[Waypoint]:
    """Make stops with the same grouping code contiguous.

    Groups are emitted where their first member appears; members keep their
    relative order. Stops without a code stay where they are relative to
    each other.
    """
    members: dict[str, list[int]] = defaultdict(list)
    for index, waypoint in enumerate(waypoints):
        if waypoint.grouping_code:
            members[waypoint.grouping_code].append(index)

    visited: set[int] = set()
    grouped: list[Waypoint] = []
    for index, waypoint in enumerate(waypoints):
        if index in visited:
            continue
        if not waypoint.grouping_code:
            grouped.append(waypoint)
            visited.add(index)
            continue
        for member in members[waypoint.grouping_code]:
            grouped.append(waypoints[member])
            visited.add(member)
    return grouped
