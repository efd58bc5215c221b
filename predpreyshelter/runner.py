"""
Drivers for a `Simulation`: a blocking batch loop that collects the
population history, and a worker thread that paces ticks for interactive hosts.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional
import logging
import threading

from predpreyshelter.simulation import Simulation, TickReport

logger = logging.getLogger(__name__)

HISTORY_KEYS = ("tick", "prey_count", "predator_count", "grass_quantity", "births", "deaths", "eaten")


def new_history() -> Dict[str, List[float]]:
    return {key: [] for key in HISTORY_KEYS}


def record(history: Dict[str, List[float]], report: TickReport) -> None:
    for key in HISTORY_KEYS:
        history[key].append(getattr(report, key))


def run_simulation(
    simulation: Simulation,
    steps: int = 200,
    log_every: int = 10,
    collect_history: bool = False,
    render: bool = False,
    render_cell_size: int = 24,
    render_fps: int = 10,
    live_plot: bool = False,
    live_plot_interval: int = 5,
    stop_when_extinct: bool = True,
) -> Dict[str, List[float]]:
    """
    Runs up to `steps` ticks on the calling thread. Returns the per-tick
    history when `collect_history` (or `live_plot`) is set, else an empty dict.
    """
    if live_plot:
        collect_history = True
    history = new_history()
    renderer = None
    plotter = None
    if render:
        try:
            from predpreyshelter.pygame_renderer import PyGameRenderer
        except ImportError as exc:
            raise RuntimeError("pygame is required for rendering") from exc
        renderer = PyGameRenderer(simulation.world.grid.size, cell_size=render_cell_size, fps=render_fps)
    if live_plot:
        from predpreyshelter.plotting import LivePlotter

        plotter = LivePlotter()

    try:
        for step_idx in range(steps):
            report = simulation.step()
            if collect_history:
                record(history, report)
            if log_every > 0 and (step_idx % log_every == 0 or step_idx == steps - 1):
                logger.info(
                    "t=%04d rabbits=%3d foxes=%3d vegetation=%4d births=%2d deaths=%2d eaten=%2d",
                    report.tick, report.prey_count, report.predator_count, report.grass_quantity,
                    report.births, report.deaths, report.eaten,
                )
            if renderer and not renderer.update(simulation.snapshot(), report):
                break
            if plotter and live_plot_interval > 0 and step_idx % live_plot_interval == 0:
                if not plotter.update(history):
                    plotter = None
            if stop_when_extinct and not simulation.has_alive_animals():
                logger.info("No animal is alive after tick %d, stopping", report.tick)
                break
    finally:
        if renderer:
            renderer.close()
    return history if collect_history else {}


class SimulationThread(threading.Thread):
    """
    Runs ticks on a daemon thread.

    Each tick runs while holding `lock`; observers take the same lock to read
    a consistent world. `cancel()` is honored between ticks only, and the
    thread sleeps `timeout_between_steps` milliseconds after every tick. The
    run ends on cancellation, after `max_steps` ticks or once no animal is
    alive.
    """

    def __init__(
        self,
        simulation: Simulation,
        timeout_between_steps: int = 0,
        max_steps: Optional[int] = None,
        on_tick: Optional[Callable[[TickReport], None]] = None,
    ):
        super().__init__(name="simulation", daemon=True)
        self.simulation = simulation
        self.timeout_between_steps = timeout_between_steps
        self.max_steps = max_steps
        self.on_tick = on_tick
        self.lock = threading.Lock()
        self.steps_done = 0
        self.error: Optional[BaseException] = None
        self._stop_requested = threading.Event()

    def cancel(self) -> None:
        self._stop_requested.set()

    @property
    def cancelled(self) -> bool:
        return self._stop_requested.is_set()

    def run(self) -> None:
        logger.info("Simulation thread started")
        try:
            while not self._stop_requested.is_set():
                if self.max_steps is not None and self.steps_done >= self.max_steps:
                    break
                with self.lock:
                    report = self.simulation.step()
                    alive = self.simulation.has_alive_animals()
                self.steps_done += 1
                if self.on_tick is not None:
                    self.on_tick(report)
                if not alive:
                    logger.info("No animal is alive after tick %d", report.tick)
                    break
                if self.timeout_between_steps > 0:
                    # wakes up early on cancel()
                    self._stop_requested.wait(self.timeout_between_steps / 1000.0)
        except Exception as exc:
            self.error = exc
            logger.exception("Simulation thread failed")
            raise
        logger.info("Simulation thread stopped after %d ticks", self.steps_done)
