from __future__ import annotations

import logging
from typing import Any

import plotly.graph_objects as go
from dash import Dash, Input, Output, dcc, html

from demand_dashboard.config import AppConfig, ServerConfig
from demand_dashboard.dashboard.hover import (
    BreakdownView,
    HoverCoordinator,
    PaneSpec,
)
from demand_dashboard.dashboard.render import (
    ChartPane,
    ViewRenderer,
    breakdown_figure,
)
from demand_dashboard.dashboard.scales import ScaleManager
from demand_dashboard.features.aggregates import DEFAULT_RESOLUTION, DataLoadResult, Resolution

LOGGER = logging.getLogger(__name__)

PRIMARY_PANE = "primary"
STREAM_PANE = "stream"
SUNBURST_PANE = "sunburst"
# Index of the markers trace in figures built by pane_figure.
MARKER_TRACE = 1

RESOLUTION_OPTIONS = [
    {"label": "Monthly", "value": Resolution.monthly.value},
    {"label": "Yearly", "value": Resolution.yearly.value},
]


class Dashboard:
    """Binds one load result to the panes, renderers and hover coordinator."""

    def __init__(self, data: DataLoadResult, config: AppConfig) -> None:
        self.data = data
        self.config = config
        layout = config.layout

        sunburst = layout.sunburst
        inner_width = sunburst.width - sunburst.margins.left - sunburst.margins.right
        inner_height = sunburst.height - sunburst.margins.top - sunburst.margins.bottom
        self.coordinator = HoverCoordinator(
            panes=[
                PaneSpec(name=PRIMARY_PANE, label="Time", date_format="%B %Y"),
                PaneSpec(
                    name=STREAM_PANE,
                    label="Year",
                    date_format="%Y",
                    highlight=True,
                    breakdown=True,
                ),
            ],
            breakdown=BreakdownView(
                config=config.breakdown,
                radius=max(min(inner_width, inner_height), 1) / 2,
            ),
        )
        self.sunburst_pane = ChartPane.from_config(SUNBURST_PANE, sunburst)
        self.renderers = {
            PRIMARY_PANE: self._renderer(PRIMARY_PANE),
            STREAM_PANE: self._renderer(STREAM_PANE),
        }
        self.resolution = DEFAULT_RESOLUTION
        self.primary.render(data.series_for(self.resolution))
        self.stream.render(data.yearly)

    def _renderer(self, name: str) -> ViewRenderer:
        layout = self.config.layout
        pane_config = getattr(layout, name)
        return ViewRenderer(
            ChartPane.from_config(name, pane_config, coordinator=self.coordinator),
            ScaleManager.from_config(pane_config, self.config.scales),
            marker_radius=layout.marker_radius,
            color=layout.line_color,
            highlight_color=layout.highlight_color,
        )

    @property
    def primary(self) -> ViewRenderer:
        return self.renderers[PRIMARY_PANE]

    @property
    def stream(self) -> ViewRenderer:
        return self.renderers[STREAM_PANE]

    def select_resolution(self, resolution: Resolution | str | None) -> go.Figure:
        self.resolution = Resolution(resolution or DEFAULT_RESOLUTION)
        series = self.data.series_for(self.resolution)
        self.primary.render(series)
        LOGGER.info("Primary view shows %d %s points", len(series), self.resolution.value)
        return self.primary.figure()

    def handle_hover(self, pane_name: str, hover_data: dict[str, Any] | None) -> None:
        """Translate a graph hoverData payload into pointer events for ``pane_name``."""
        renderer = self.renderers[pane_name]
        pane = renderer.pane
        points = (hover_data or {}).get("points") or []
        if not points:
            pane.pointer_leave()
            return

        hovered = points[0]
        if hovered.get("curveNumber", MARKER_TRACE) != MARKER_TRACE:
            return
        index = hovered.get("pointIndex", hovered.get("pointNumber", -1))
        marker = renderer.marker_for(int(index))
        if marker is None:
            pane.pointer_leave()
            return

        # hoverData carries the marker's bbox, not the pointer; the tooltip is
        # anchored to the marker for as long as it stays hovered.
        bbox = hovered.get("bbox") or {}
        x = float(bbox.get("x0", marker.cx))
        y = float(bbox.get("y0", marker.cy))
        state = self.coordinator.state
        if state.pane == pane.name and state.point == marker.point:
            pane.pointer_move(x, y)
        else:
            pane.pointer_enter(marker, x, y)

    def tooltip_props(self, pane_name: str) -> tuple[bool, dict[str, float] | None, list[Any]]:
        tooltip = self.coordinator.tooltip
        if not tooltip.visible or tooltip.pane != pane_name:
            return False, None, []
        bbox = {"x0": tooltip.left, "x1": tooltip.left, "y0": tooltip.top, "y1": tooltip.top}
        children = [html.P(line, style={"margin": 0}) for line in tooltip.lines]
        return True, bbox, children

    def stream_figure(self) -> go.Figure:
        return self.stream.figure(highlight=self.coordinator.highlight)

    def sunburst_figure(self) -> go.Figure:
        return breakdown_figure(self.coordinator.breakdown, self.sunburst_pane)


def build_layout(dashboard: Dashboard) -> html.Div:
    return html.Div(
        [
            html.H1("National Demand"),
            html.Label("Resolution", htmlFor="resolution-select"),
            dcc.Dropdown(
                id="resolution-select",
                options=RESOLUTION_OPTIONS,
                value=dashboard.resolution.value,
                clearable=False,
            ),
            dcc.Graph(
                id="primary-chart",
                figure=dashboard.primary.figure(),
                clear_on_unhover=True,
            ),
            dcc.Tooltip(id="primary-tooltip"),
            html.Div(
                [
                    dcc.Graph(
                        id="stream-chart",
                        figure=dashboard.stream_figure(),
                        clear_on_unhover=True,
                    ),
                    dcc.Graph(id="sunburst-chart", figure=dashboard.sunburst_figure()),
                ],
                style={"display": "flex", "flexWrap": "wrap"},
            ),
            dcc.Tooltip(id="stream-tooltip"),
        ]
    )


def register_callbacks(app: Dash, dashboard: Dashboard) -> None:
    @app.callback(
        Output("primary-chart", "figure"),
        Input("resolution-select", "value"),
    )
    def _on_resolution(value: str | None) -> go.Figure:
        return dashboard.select_resolution(value)

    @app.callback(
        Output("primary-tooltip", "show"),
        Output("primary-tooltip", "bbox"),
        Output("primary-tooltip", "children"),
        Input("primary-chart", "hoverData"),
    )
    def _on_primary_hover(hover_data: dict[str, Any] | None) -> tuple[Any, ...]:
        dashboard.handle_hover(PRIMARY_PANE, hover_data)
        return dashboard.tooltip_props(PRIMARY_PANE)

    @app.callback(
        Output("stream-tooltip", "show"),
        Output("stream-tooltip", "bbox"),
        Output("stream-tooltip", "children"),
        Output("stream-chart", "figure"),
        Output("sunburst-chart", "figure"),
        Input("stream-chart", "hoverData"),
    )
    def _on_stream_hover(hover_data: dict[str, Any] | None) -> tuple[Any, ...]:
        dashboard.handle_hover(STREAM_PANE, hover_data)
        show, bbox, children = dashboard.tooltip_props(STREAM_PANE)
        return show, bbox, children, dashboard.stream_figure(), dashboard.sunburst_figure()


def create_app(data: DataLoadResult, config: AppConfig) -> Dash:
    dashboard = Dashboard(data=data, config=config)
    app = Dash(__name__, title="National Demand Dashboard")
    app.layout = build_layout(dashboard)
    register_callbacks(app, dashboard)
    return app


def run_server(app: Dash, server: ServerConfig) -> None:
    # One request at a time keeps pointer events strictly ordered.
    app.run(host=server.host, port=server.port, debug=server.debug, threaded=False)
