from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from demand_dashboard.config import BreakdownConfig
from demand_dashboard.features.aggregates import SeriesPoint
from demand_dashboard.features.breakdown import (
    Arc,
    BreakdownNode,
    partition_layout,
    synthesize_breakdown,
)

LOGGER = logging.getLogger(__name__)

# Tooltip box sits right of and above the pointer.
TOOLTIP_OFFSET_X = 10.0
TOOLTIP_OFFSET_Y = -10.0


class PointerKind(str, Enum):
    enter = "enter"
    move = "move"
    leave = "leave"


@dataclass(frozen=True)
class PointerEvent:
    kind: PointerKind
    pane: str
    point: SeriesPoint | None = None
    x: float = 0.0
    y: float = 0.0
    # Marker position inside the pane, used by the reference line.
    screen_x: float | None = None


@dataclass(frozen=True)
class HoverState:
    point: SeriesPoint | None = None
    pane: str | None = None
    screen_x: float | None = None

    @property
    def is_idle(self) -> bool:
        return self.point is None


IDLE = HoverState()


@dataclass(frozen=True)
class HoverTransition:
    previous: HoverState
    current: HoverState


@dataclass(frozen=True)
class PaneSpec:
    name: str
    label: str = "Time"
    date_format: str = "%B %Y"
    highlight: bool = False
    breakdown: bool = False


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def tooltip_lines(spec: PaneSpec, point: SeriesPoint) -> tuple[str, str]:
    return (
        f"{spec.label}: {point.bucket.strftime(spec.date_format)}",
        f"Demand: {round_half_up(point.value)} MW",
    )


@dataclass
class Tooltip:
    visible: bool = False
    pane: str | None = None
    lines: tuple[str, ...] = ()
    left: float = 0.0
    top: float = 0.0

    def show(self, pane: str, lines: tuple[str, ...]) -> None:
        self.visible = True
        self.pane = pane
        self.lines = lines

    def follow(self, x: float, y: float) -> None:
        self.left = x + TOOLTIP_OFFSET_X
        self.top = y + TOOLTIP_OFFSET_Y

    def hide(self) -> None:
        self.visible = False


@dataclass
class HighlightLine:
    visible: bool = False
    pane: str | None = None
    x: float | None = None

    def show(self, pane: str, x: float | None) -> None:
        self.visible = x is not None
        self.pane = pane
        self.x = x

    def hide(self) -> None:
        self.visible = False


@dataclass
class BreakdownView:
    """Last breakdown drawn; kept as-is when the hover ends."""

    config: BreakdownConfig = field(default_factory=BreakdownConfig)
    radius: float = 1.0
    root: BreakdownNode | None = None
    arcs: list[Arc] = field(default_factory=list)
    redraws: int = 0

    def redraw(self, point: SeriesPoint) -> None:
        self.root = synthesize_breakdown(point, self.config)
        self.arcs = partition_layout(self.root, self.radius)
        self.redraws += 1


class HoverCoordinator:
    """Owns the hover state for a group of linked panes.

    ``dispatch`` is the only way to change state. Views read ``state``,
    ``tooltip``, ``highlight`` and ``breakdown`` but never write them.
    """

    def __init__(
        self,
        panes: Iterable[PaneSpec],
        breakdown: BreakdownView | None = None,
    ) -> None:
        self._panes = {spec.name: spec for spec in panes}
        self._state = IDLE
        self._subscribers: list[Callable[[HoverTransition], None]] = []
        self.tooltip = Tooltip()
        self.highlight = HighlightLine()
        self.breakdown = breakdown or BreakdownView()

    @property
    def state(self) -> HoverState:
        return self._state

    def pane(self, name: str) -> PaneSpec:
        try:
            return self._panes[name]
        except KeyError:
            raise ValueError(f"Unknown pane: {name}") from None

    def subscribe(self, callback: Callable[[HoverTransition], None]) -> None:
        self._subscribers.append(callback)

    def dispatch(self, *events: PointerEvent) -> HoverState:
        """Apply one tick of pointer events in arrival order."""
        for index, event in enumerate(events):
            self.pane(event.pane)
            if event.kind == PointerKind.enter:
                if event.point is None:
                    raise ValueError("Pointer-enter requires a point")
                self._enter(event)
            elif event.kind == PointerKind.move:
                if not self._state.is_idle and event.pane == self._state.pane:
                    self.tooltip.follow(event.x, event.y)
            elif event.kind == PointerKind.leave:
                if event.pane != self._state.pane:
                    continue
                if any(later.kind == PointerKind.enter for later in events[index + 1 :]):
                    continue
                self._transition(IDLE)
        return self._state

    def _enter(self, event: PointerEvent) -> None:
        spec = self.pane(event.pane)
        self._transition(
            HoverState(point=event.point, pane=spec.name, screen_x=event.screen_x),
            position=(event.x, event.y),
        )

    def _transition(
        self, current: HoverState, position: tuple[float, float] | None = None
    ) -> None:
        previous = self._state
        self._state = current
        if current.point is None:
            self.tooltip.hide()
            self.highlight.hide()
        else:
            spec = self.pane(current.pane or "")
            self.tooltip.show(spec.name, tooltip_lines(spec, current.point))
            if position is not None:
                self.tooltip.follow(*position)
            if spec.highlight:
                self.highlight.show(spec.name, current.screen_x)
            else:
                self.highlight.hide()
            if spec.breakdown:
                self.breakdown.redraw(current.point)
        LOGGER.debug("Hover %s -> %s", previous, current)
        transition = HoverTransition(previous=previous, current=current)
        for callback in self._subscribers:
            callback(transition)
