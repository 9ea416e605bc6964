from __future__ import annotations

from pathlib import Path

import matplotlib.dates as mdates
import matplotlib.pyplot as plt

from demand_dashboard.dashboard.render import X_AXIS_TITLE, Y_AXIS_TITLE
from demand_dashboard.dashboard.scales import ViewState
from demand_dashboard.features.aggregates import DemandSeries
from demand_dashboard.viz.common import save_figure

TITLES = {
    "monthly": "Monthly mean national demand",
    "yearly": "Yearly mean national demand",
}


def plot_demand_series(
    series: DemandSeries,
    view_state: ViewState,
    output_path: Path,
    color: str = "#1e90ff",
) -> Path:
    frame = series.to_frame()
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(frame["bucket"], frame["value"], color=color, linewidth=2)
    ax.scatter(frame["bucket"], frame["value"], color=color, s=16, zorder=3)

    ax.set_xlim(*view_state.x_domain)
    ax.set_ylim(*view_state.y_domain)
    ax.xaxis.set_major_locator(mdates.YearLocator())
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y"))
    ax.grid(True, alpha=0.3)
    ax.set_title(TITLES.get(series.resolution.value, "National demand"))
    ax.set_xlabel(X_AXIS_TITLE)
    ax.set_ylabel(Y_AXIS_TITLE)
    return save_figure(fig, output_path)
