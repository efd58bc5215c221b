# discretionary libraries
from predpreyshelter.config.config_simulation import run_config
from predpreyshelter.errors import ConfigurationError
from predpreyshelter.runner import SimulationThread, new_history, record, run_simulation
from predpreyshelter.settings import SimulationSettings, build_settings, build_simulation, export_settings, load_settings

# external libraries
import argparse
import logging
import sys


def setup_logging(level=logging.INFO, log_file=None):
    """Sets up the logging configuration."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def parse_arguments(argv=None):
    """Parses command line arguments."""
    parser = argparse.ArgumentParser(description="Run the rabbits, foxes and shelters grid simulation.")
    parser.add_argument('--settings', type=str, default=None, help='JSON settings file to load')
    parser.add_argument('--export_settings', type=str, default=None, help='Directory to export the used settings to')
    parser.add_argument('--steps', type=int, default=run_config["max_steps"], help='Maximum number of ticks')
    parser.add_argument('--seed', type=int, default=None, help='Random seed (overrides the settings file)')
    parser.add_argument('--log_every', type=int, default=run_config["log_every"], help='Log a summary every n ticks')
    parser.add_argument('--render', action='store_true', default=run_config["render"], help='Open the pygame viewer')
    parser.add_argument('--live_plot', action='store_true', default=run_config["live_plot"], help='Show a live population chart')
    parser.add_argument('--plot_path', type=str, default=run_config["plot_path"], help='Save the population chart to this file')
    parser.add_argument('--threaded', action='store_true', help='Run ticks on a worker thread, paced by the settings timeout')
    parser.add_argument('--quiet', action='store_true', help='Do not log individual tick events')
    parser.add_argument('--log_file', type=str, default=None, help='Also write the log to this file')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_arguments(argv)
    setup_logging(log_file=args.log_file)

    overrides = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.quiet:
        overrides["logs_enabled"] = False
    try:
        if args.settings:
            settings = load_settings(args.settings)
            settings = SimulationSettings.from_dict({**settings.to_dict(), **overrides})
        else:
            settings = build_settings(overrides)
        simulation = build_simulation(settings)
    except ConfigurationError as e:
        logging.error(f"Invalid configuration: {e}")
        return 2

    if args.export_settings:
        export_settings(settings, args.export_settings)

    if args.threaded:
        history = new_history()
        thread = SimulationThread(
            simulation,
            timeout_between_steps=settings.timeout_between_simulation_steps,
            max_steps=args.steps,
            on_tick=lambda report: record(history, report),
        )
        thread.start()
        try:
            thread.join()
        except KeyboardInterrupt:
            thread.cancel()
            thread.join()
    else:
        history = run_simulation(
            simulation,
            steps=args.steps,
            log_every=args.log_every,
            collect_history=bool(args.plot_path),
            render=args.render,
            render_cell_size=run_config["render_cell_size"],
            render_fps=run_config["render_fps"],
            live_plot=args.live_plot,
            live_plot_interval=run_config["live_plot_interval"],
        )

    if args.plot_path:
        from predpreyshelter.plotting import plot_history

        plot_history(history, args.plot_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
