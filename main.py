# main.py
"""
Main entry point for the particle simulation.

This script orchestrates the entire lifecycle:
1. Loads configuration from `config.json` (or the built-in defaults).
2. Initializes the logging system.
3. Sets up the particles, the window and the frame loop.
4. Runs frames until the window is closed.
5. Handles clean shutdown.
"""
import logging
import sys
import cProfile
import pstats
import io
from utils import setup_logging, load_config, validate_config

def main() -> int:
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return 1

    try:
        setup_logging(config)
    except ValueError as e:
        print(f"FATAL: Invalid logging configuration. Error: {e}")
        return 1

    logging.info("--- Peculiar Particles Starting ---")

    try:
        validate_config(config)
    except ValueError:
        return 1

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from particle import ParticleSystem
    from simulation import FrameContext, MotionRule, Simulation
    from visualization import ClockScheduler, RendererError, Visualizer

    # --- Component Initialization ---
    # 1. The visualizer determines the canvas dimensions.
    try:
        visualizer = Visualizer(vis_params)
    except RendererError:
        logging.critical("Render target setup failed. Aborting.")
        return 1

    # 2. Everything else is sized from the canvas.
    particles = ParticleSystem(sim_params)
    scheduler = ClockScheduler(vis_params.get('fps'))
    context = FrameContext(
        motion=MotionRule.from_config(sim_params.get('motion_rule')),
        width=visualizer.width,
        height=visualizer.height,
    )
    sim = Simulation(particles, visualizer, scheduler, run_params)

    profiler = cProfile.Profile() if run_params.get('profile') else None

    if profiler:
        profiler.enable()
    sim.start(context)
    visualizer.present()
    while visualizer.handle_events(context):
        if scheduler.run_pending():
            visualizer.present()
    if profiler:
        profiler.disable()

    visualizer.close()
    logging.info(f"Frame loop finished after {sim.frame_count} frames.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Peculiar Particles Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
