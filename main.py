# main.py
"""
Main entry point for the Entropy Gas simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the simulation (and, unless headless, the visualizer).
4. Runs the main loop.
5. Handles clean shutdown.
"""
import cProfile
import io
import logging
import pstats
import sys

from constants import DEFAULT_GRAPH_HEIGHT, DEFAULT_WINDOW_HEIGHT, DEFAULT_WINDOW_WIDTH
from utils import setup_logging, load_config


def main(config_path: str = 'config.json'):
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except (OSError, ValueError) as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config['logging'])
    logging.info("--- Entropy Gas Simulation Starting ---")

    sim_params = config['simulation_parameters']
    entropy_params = config['entropy']
    run_params = config['run_control']
    vis_params = config['visualization']

    max_steps = int(run_params.get('max_steps', 0))
    if run_params.get('headless', False) and max_steps <= 0:
        logging.critical(
            "Configuration error: headless runs need a positive run_control.max_steps, "
            f"got {max_steps}."
        )
        return 1

    from simulation import Simulation

    # --- Component Initialization ---
    # The visualizer decides the particle area, so it comes first.
    visualizer = None
    if run_params.get('headless', False):
        sim_width = vis_params.get('window_width', DEFAULT_WINDOW_WIDTH)
        sim_height = (
            vis_params.get('window_height', DEFAULT_WINDOW_HEIGHT)
            - vis_params.get('graph_height', DEFAULT_GRAPH_HEIGHT)
        )
        logging.info("Running headless; no window will be opened.")
    else:
        from visualization import Visualizer
        visualizer = Visualizer(vis_params)
        sim_width, sim_height = visualizer.sim_width, visualizer.sim_height

    try:
        sim = Simulation(sim_params, entropy_params, sim_width, sim_height)
    except ValueError:
        if visualizer is not None:
            visualizer.close()
        return 1

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    log_throttle = max(int(run_params.get('log_throttle_steps', 100)), 1)

    if profiler is not None:
        profiler.enable()

    running = True
    while running:
        sim.step()

        # The visualizer handles input and returns False when the user quits.
        if visualizer is not None and not visualizer.draw(sim):
            running = False

        # Hot loops must throttle logs
        if sim.step_count % log_throttle == 0:
            sample = sim.latest_sample
            entropy_text = (
                f"H={sample.entropy:.3f} / {sample.max_entropy:.2f} ({sample.normalized:.0%})"
                if sample is not None else "H=n/a"
            )
            logging.info(
                f"Step {sim.step_count} | Particles: {sim.particles.particle_count} | {entropy_text}"
            )
            if sim.particles.particle_count:
                logging.debug(
                    f"Step {sim.step_count} | Collisions: {sim.last_collision_count} | "
                    f"Mean kinetic energy: {sim.particles.kinetic_energies().mean():.4f}"
                )

        if max_steps and sim.step_count >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False

    if profiler is not None:
        profiler.disable()

    sim.stop_spawning()
    if visualizer is not None:
        visualizer.close()
    logging.info("Simulation loop finished.")

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Entropy Gas Simulation Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
