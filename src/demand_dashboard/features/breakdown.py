from __future__ import annotations

import math
from dataclasses import dataclass

from demand_dashboard.config import BreakdownConfig
from demand_dashboard.features.aggregates import SeriesPoint

FULL_TURN = 2 * math.pi


@dataclass(frozen=True)
class BreakdownNode:
    name: str
    value: float
    children: tuple[BreakdownNode, ...] = ()

    def leaves(self) -> list[BreakdownNode]:
        if not self.children:
            return [self]
        found: list[BreakdownNode] = []
        for child in self.children:
            found.extend(child.leaves())
        return found

    def height(self) -> int:
        if not self.children:
            return 0
        return 1 + max(child.height() for child in self.children)


@dataclass(frozen=True)
class Arc:
    name: str
    path: tuple[str, ...]
    depth: int
    value: float
    x0: float
    x1: float
    y0: float
    y1: float
    is_leaf: bool = False

    @property
    def span(self) -> float:
        return self.x1 - self.x0


def synthesize_breakdown(
    point: SeriesPoint,
    config: BreakdownConfig | None = None,
) -> BreakdownNode:
    """Split one hovered demand value into fixed source shares."""
    config = config or BreakdownConfig()
    values = [point.value * share.share for share in config.shares[:-1]]
    values.append(_closing_value(point.value, values))
    leaves = tuple(
        BreakdownNode(name=share.name, value=value)
        for share, value in zip(config.shares, values)
    )
    return BreakdownNode(name=config.root_name, value=point.value, children=leaves)


def _closing_value(total: float, values: list[float]) -> float:
    """Return the last share so that an in-order float sum lands on ``total``."""
    partial = sum(values, 0.0)
    last = total - partial
    while partial + last != total:
        last = math.nextafter(last, math.inf if partial + last < total else -math.inf)
    return last


def partition_layout(root: BreakdownNode, radius: float) -> list[Arc]:
    """Lay out ``root`` as concentric rings, parents before children.

    Each child takes a slice of its parent's angle proportional to its value, in
    declared order. A zero-valued parent gives its children zero-width slices.
    """
    band = radius / (root.height() + 1)
    arcs: list[Arc] = []

    def _visit(
        node: BreakdownNode,
        depth: int,
        path: tuple[str, ...],
        x0: float,
        x1: float,
    ) -> None:
        path = path + (node.name,)
        arcs.append(
            Arc(
                name=node.name,
                path=path,
                depth=depth,
                value=node.value,
                x0=x0,
                x1=x1,
                y0=depth * band,
                y1=(depth + 1) * band,
                is_leaf=not node.children,
            )
        )
        total = math.fsum(child.value for child in node.children)
        cursor = x0
        for child in node.children:
            width = (x1 - x0) * child.value / total if total else 0.0
            _visit(child, depth + 1, path, cursor, cursor + width)
            cursor += width

    _visit(root, 0, (), 0.0, FULL_TURN)
    return arcs
