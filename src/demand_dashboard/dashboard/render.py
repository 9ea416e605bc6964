from __future__ import annotations

from dataclasses import dataclass, field

import plotly.graph_objects as go

from demand_dashboard.config import MarginsConfig, PaneConfig
from demand_dashboard.dashboard.hover import (
    BreakdownView,
    HighlightLine,
    HoverCoordinator,
    PointerEvent,
    PointerKind,
)
from demand_dashboard.dashboard.scales import ScaleManager, ViewState
from demand_dashboard.features.aggregates import DemandSeries, SeriesPoint

X_AXIS_TITLE = "Year"
Y_AXIS_TITLE = "National Demand (MW)"
INNER_RING_COLOR = "#1e90ff"
OUTER_RING_COLOR = "#87ceeb"


@dataclass(frozen=True)
class LinePath:
    points: tuple[tuple[float, float], ...]
    color: str
    stroke_width: float = 2.0


@dataclass(frozen=True)
class Marker:
    index: int
    point: SeriesPoint
    cx: float
    cy: float
    r: float
    color: str


@dataclass
class ChartPane:
    """A drawing surface whose elements are replaced wholesale on each render."""

    name: str
    width: int
    height: int
    margins: MarginsConfig = field(default_factory=MarginsConfig)
    coordinator: HoverCoordinator | None = None
    elements: list[LinePath | Marker] = field(default_factory=list)

    @classmethod
    def from_config(
        cls,
        name: str,
        pane: PaneConfig,
        coordinator: HoverCoordinator | None = None,
    ) -> ChartPane:
        return cls(
            name=name,
            width=pane.width,
            height=pane.height,
            margins=pane.margins,
            coordinator=coordinator,
        )

    @property
    def paths(self) -> list[LinePath]:
        return [element for element in self.elements if isinstance(element, LinePath)]

    @property
    def markers(self) -> list[Marker]:
        return [element for element in self.elements if isinstance(element, Marker)]

    def clear(self) -> None:
        self.elements.clear()

    def pointer_enter(self, marker: Marker, x: float, y: float) -> None:
        self._route(
            PointerEvent(
                kind=PointerKind.enter,
                pane=self.name,
                point=marker.point,
                x=x,
                y=y,
                screen_x=marker.cx,
            )
        )

    def pointer_move(self, x: float, y: float) -> None:
        self._route(PointerEvent(kind=PointerKind.move, pane=self.name, x=x, y=y))

    def pointer_leave(self) -> None:
        self._route(PointerEvent(kind=PointerKind.leave, pane=self.name))

    def _route(self, event: PointerEvent) -> None:
        if self.coordinator is not None:
            self.coordinator.dispatch(event)


class ViewRenderer:
    def __init__(
        self,
        pane: ChartPane,
        scales: ScaleManager,
        *,
        marker_radius: float = 4.0,
        color: str = "#1e90ff",
        highlight_color: str = "red",
    ) -> None:
        self.pane = pane
        self.scales = scales
        self.marker_radius = marker_radius
        self.color = color
        self.highlight_color = highlight_color
        self.view_state: ViewState | None = None

    def render(self, series: DemandSeries) -> ViewState | None:
        """Discard everything drawn in the pane, then draw ``series``."""
        self.pane.clear()
        self.view_state = None
        if series.empty:
            return None

        state = self.scales.recompute(series)
        coordinates = [(state.x(point.bucket), state.y(point.value)) for point in series]
        self.pane.elements.append(LinePath(points=tuple(coordinates), color=self.color))
        for index, (point, (cx, cy)) in enumerate(zip(series, coordinates)):
            self.pane.elements.append(
                Marker(
                    index=index,
                    point=point,
                    cx=cx,
                    cy=cy,
                    r=self.marker_radius,
                    color=self.color,
                )
            )
        self.view_state = state
        return state

    def marker_for(self, index: int) -> Marker | None:
        markers = self.pane.markers
        if 0 <= index < len(markers):
            return markers[index]
        return None

    def figure(self, highlight: HighlightLine | None = None) -> go.Figure:
        return pane_figure(
            self.pane,
            self.view_state,
            highlight=highlight,
            highlight_color=self.highlight_color,
        )


def _layout_margin(pane: ChartPane) -> dict[str, int]:
    margins = pane.margins
    return dict(l=margins.left, r=margins.right, t=margins.top, b=margins.bottom)


def pane_figure(
    pane: ChartPane,
    view_state: ViewState | None,
    highlight: HighlightLine | None = None,
    highlight_color: str = "red",
) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        width=pane.width,
        height=pane.height,
        margin=_layout_margin(pane),
        showlegend=False,
        template="plotly_white",
    )
    if view_state is None or not pane.markers:
        fig.update_layout(title="No data to chart")
        return fig

    line = pane.paths[0]
    markers = pane.markers
    buckets = [marker.point.bucket for marker in markers]
    values = [marker.point.value for marker in markers]

    fig.add_trace(
        go.Scatter(
            x=buckets,
            y=values,
            mode="lines",
            line=dict(color=line.color, width=line.stroke_width),
            hoverinfo="skip",
            name="line",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=buckets,
            y=values,
            mode="markers",
            marker=dict(color=markers[0].color, size=2 * markers[0].r),
            # Hover text comes from the coordinator's tooltip.
            hoverinfo="none",
            name="markers",
        )
    )

    x0, x1 = view_state.x_domain
    y0, y1 = view_state.y_domain
    fig.update_xaxes(title=X_AXIS_TITLE, range=[x0, x1], tickformat="%Y", dtick="M12")
    fig.update_yaxes(title=Y_AXIS_TITLE, range=[y0, y1], nticks=6)

    if highlight is not None and highlight.visible and highlight.pane == pane.name:
        if highlight.x is not None:
            at = view_state.x.invert(highlight.x)
            fig.add_shape(
                type="line",
                x0=at,
                x1=at,
                xref="x",
                y0=0,
                y1=1,
                yref="paper",
                line=dict(color=highlight_color, width=2),
            )
    return fig


def breakdown_figure(view: BreakdownView, pane: ChartPane) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        width=pane.width,
        height=pane.height,
        margin=dict(l=0, r=0, t=0, b=0),
        showlegend=False,
    )
    if view.root is None:
        return fig

    ids = ["/".join(arc.path) for arc in view.arcs]
    parents = ["/".join(arc.path[:-1]) for arc in view.arcs]
    colors = [INNER_RING_COLOR if arc.depth == 1 else OUTER_RING_COLOR for arc in view.arcs]
    fig.add_trace(
        go.Sunburst(
            ids=ids,
            labels=[arc.name for arc in view.arcs],
            parents=parents,
            # Leaves sum exactly to their parent.
            values=[arc.value for arc in view.arcs],
            branchvalues="total",
            sort=False,
            marker=dict(colors=colors),
        )
    )
    return fig
