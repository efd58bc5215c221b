"""Population charts from a run history (see `runner.run_simulation`)."""
from __future__ import annotations

from typing import Dict, List, Optional
import logging
import os

logger = logging.getLogger(__name__)

PANELS = (
    ("population", (("prey_count", "rabbits"), ("predator_count", "foxes"))),
    ("vegetation", (("grass_quantity", "vegetation units"),)),
    ("events", (("births", "births"), ("deaths", "deaths"), ("eaten", "eaten"))),
)


def _pyplot():
    try:
        import matplotlib.pyplot as plt
    except ImportError as exc:
        raise RuntimeError("matplotlib is required for plotting") from exc
    return plt


def plot_history(history: Dict[str, List[float]], out_path: Optional[str] = None) -> None:
    plt = _pyplot()
    ticks = history.get("tick", [])

    fig, axes = plt.subplots(len(PANELS), 1, figsize=(10, 3 * len(PANELS)), sharex=True)
    for ax, (ylabel, series) in zip(axes, PANELS):
        for key, label in series:
            ax.plot(ticks, history.get(key, []), label=label)
        ax.set_ylabel(ylabel)
        ax.legend()
    axes[-1].set_xlabel("tick")

    fig.tight_layout()
    if out_path:
        fig.savefig(out_path)
        plt.close(fig)
    else:
        plt.show()


class LivePlotter:
    """Interactive population chart refreshed while the run goes on; inert on headless sessions."""

    def __init__(self):
        self.plt = _pyplot()
        if not os.environ.get("DISPLAY"):
            logger.warning("LivePlotter disabled: no DISPLAY found (headless session).")
            self.alive = False
            return
        self.plt.ion()
        self.fig, self.axes = self.plt.subplots(len(PANELS), 1, figsize=(10, 3 * len(PANELS)), sharex=True)

        self.lines = {}
        for ax, (ylabel, series) in zip(self.axes, PANELS):
            for key, label in series:
                self.lines[key], = ax.plot([], [], label=label)
            ax.set_ylabel(ylabel)
            ax.legend()
        self.axes[-1].set_xlabel("tick")
        self.fig.tight_layout()
        self.plt.show(block=False)
        self.alive = True

    def update(self, history: Dict[str, List[float]]) -> bool:
        if not self.alive:
            return False
        ticks = history.get("tick", [])
        if not ticks:
            return True
        for key, line in self.lines.items():
            line.set_data(ticks, history.get(key, []))

        xmax = max(ticks[-1], 1)
        for ax in self.axes:
            ax.set_xlim(0, xmax)
            ax.relim()
            ax.autoscale_view(scalex=False, scaley=True)

        try:
            self.fig.canvas.draw_idle()
            self.plt.pause(0.001)
        except RuntimeError as exc:
            # window closed by the user
            logger.info("Live plot stopped: %s", exc)
            self.alive = False
            return False
        return True
