# main.py
"""
Main entry point for the Perlin flow-field renderer.

This script orchestrates the application lifecycle:
1. Parses the command line and loads configuration from `config.json`.
2. Initializes the logging system.
3. Builds the configuration snapshot, the simulation and the canvas.
4. Runs either the interactive window loop or a headless render.
5. Exports snapshots on request and shuts down cleanly.
"""
import argparse
import logging
import os
import sys
import cProfile
import pstats
import io
from typing import Optional, Sequence

from utils import setup_logging, load_config


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Animated Perlin-noise flow-field art.")
    parser.add_argument("--config", default="config.json", help="Path to the JSON configuration file.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the first generation.")
    parser.add_argument("--headless", action="store_true", help="Render without opening a window.")
    parser.add_argument("--frames", type=int, default=None,
                        help="Frames to render; overrides run_control.max_steps.")
    parser.add_argument("--export", choices=("png", "svg"), action="append", default=None,
                        help="Snapshot format written when the run ends. May be repeated.")
    parser.add_argument("--log-level", default=None, help="Overrides the configured log level.")
    parser.add_argument("--profile", action="store_true", help="Log a cProfile summary of the loop.")
    return parser.parse_args(argv)


def run_headless(simulation, canvas, recorder, frames: int, log_throttle: int = 100) -> int:
    """
    Renders `frames` ticks onto the canvas without a window.

    Returns the total number of segments emitted.
    """
    emitted = 0
    for step_num in range(1, frames + 1):
        batch = simulation.tick()
        canvas.draw_segments(batch)
        recorder.record(batch)
        emitted += len(batch)

        # Hot loops must throttle logs
        if log_throttle and step_num % log_throttle == 0:
            logging.info(f"Rendered frame {step_num}/{frames}")
            logging.debug(f"Frame {step_num} | {simulation.particles.statistics()}")
    return emitted


def run_interactive(simulation, visualizer, recorder, max_steps: int, log_throttle: int = 100) -> None:
    """
    Runs the window loop until the user quits or max_steps frames are drawn.

    A max_steps of 0 runs until the window is closed.
    """
    drawn = 0
    while True:
        batch = simulation.tick()
        if batch is not None:
            recorder.record(batch)
            drawn += 1

        if not visualizer.draw(simulation, batch):
            break

        if batch is not None and log_throttle and simulation.frame % log_throttle == 0:
            logging.info(f"Generation {simulation.generation}, frame {simulation.frame}")
            logging.debug(f"Frame {simulation.frame} | {simulation.particles.statistics()}")

        if max_steps and drawn >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping animation.")
            break


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    The main function to run the renderer.
    """
    args = _parse_args(argv)

    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"FATAL: Could not load {args.config}. Error: {e}")
        return 1

    setup_logging(config, level=args.log_level)
    logging.info("--- Flow Field Renderer Starting ---")

    sim_params = dict(config['simulation_parameters'])
    run_params = config['run_control']
    vis_params = config['visualization']
    export_params = config['export']
    if args.seed is not None:
        sim_params['seed'] = args.seed

    if args.headless:
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

    # Imported after the video driver is chosen.
    import pygame
    from config import SimulationConfig, ConfigurationError, fit_canvas_size
    from constants import HEADLESS_FRAMES, SVG_MAX_SEGMENTS
    from export import SegmentRecorder, export_snapshot
    from simulation import Simulation
    from visualization import TrailCanvas, Visualizer

    try:
        sim_config = SimulationConfig.from_params(sim_params)
        size = fit_canvas_size(vis_params.get('container_width'))
    except ConfigurationError as e:
        logging.critical(f"Invalid configuration: {e}")
        return 2

    simulation = Simulation(sim_config, size, size)
    recorder = SegmentRecorder(export_params.get('svg_max_segments', SVG_MAX_SEGMENTS))
    export_dir = export_params.get('directory', '.')
    log_throttle = run_params.get('log_throttle_steps', 100)
    max_steps = args.frames if args.frames is not None else run_params.get('max_steps', 0)

    profiler = cProfile.Profile() if args.profile else None
    if profiler:
        profiler.enable()

    if args.headless:
        pygame.init()
        canvas = TrailCanvas(size, size)
        frames = max_steps or HEADLESS_FRAMES
        emitted = run_headless(simulation, canvas, recorder, frames, log_throttle)
        logging.info(f"Headless render finished: {frames} frames, {emitted} segments.")
    else:
        visualizer = Visualizer(size, size, recorder,
                                show_hud=vis_params.get('show_hud', True),
                                fps=vis_params.get('fps', 60),
                                export_dir=export_dir)
        canvas = visualizer.canvas
        run_interactive(simulation, visualizer, recorder, max_steps, log_throttle)

    if profiler:
        profiler.disable()
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    for fmt in args.export or []:
        try:
            export_snapshot(fmt, canvas.surface, recorder, export_dir)
        except (OSError, pygame.error) as e:
            logging.error(f"Could not export {fmt.upper()} snapshot: {e}")

    if args.headless:
        pygame.quit()
    else:
        visualizer.close()

    logging.info("--- Flow Field Renderer Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
