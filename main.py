# main.py

import time
import json
import logging
import pygame
import numpy as np
import constants
import logger_setup
from frame_driver import FrameDriver
from input_state import InputSample
from renderer import SceneRenderer
from scene import Scene

# Get the application's dedicated logger
logger = logging.getLogger("canyon_stream")


def to_scene_coords(pos, window_size):
    """Maps a window pixel position to scene units."""
    return (
        pos[0] / window_size[0] * constants.WIDTH,
        pos[1] / window_size[1] * constants.HEIGHT,
    )


def handle_events(scene, sample, window_size):
    """
    Feeds pygame events into the input sample and the reset trigger.
    Returns False once the window has been closed.
    """
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN and event.key == pygame.K_r:
            scene.manual_reset(sample)
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return False
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            sample.press(*to_scene_coords(event.pos, window_size))
        elif event.type == pygame.MOUSEMOTION:
            sample.move(*to_scene_coords(event.pos, window_size))
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            sample.release(*to_scene_coords(event.pos, window_size))
    return True


def run_loop(scene, sample, driver, renderer, window, canvas, clock, fps, log_interval):
    """The main loop: input, one simulation tick, draw, present."""
    running = True
    while running:
        running = handle_events(scene, sample, window.get_size())

        # --- Simulation ---
        driver.tick(time.perf_counter())

        # --- Logging (throttled) ---
        if driver.ticks % log_interval == 0:
            stats = scene.stats()
            logger.debug(
                f"Tick={driver.ticks}, "
                f"Phase={stats['phase']}, "
                f"Resource={stats['resource']:.3f}, "
                f"Drops={stats['drops']}, "
                f"Splashes={stats['splashes']}, "
                f"Ripples={stats['ripples']}, "
                f"AmbientT={scene.ambient.bg_t:.1f}"
            )

        # --- Drawing ---
        renderer.draw(canvas, scene)
        pygame.transform.scale(canvas, window.get_size(), window)
        pygame.display.flip()
        clock.tick(fps)


def main():
    """
    Main function to initialize and run the scene.
    """
    # --- Setup ---
    logger_setup.setup_logging()

    with open('config.json', 'r') as f:
        config = json.load(f)
    sim_config = config['simulation']
    display_config = config['display']

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    # --- Initialization ---
    pygame.init()
    scale = display_config['scale']
    window = pygame.display.set_mode((constants.WIDTH * scale, constants.HEIGHT * scale))
    pygame.display.set_caption(constants.TITLE)
    canvas = pygame.Surface((constants.WIDTH, constants.HEIGHT))
    clock = pygame.time.Clock()

    scene = Scene(sim_config, rng)
    sample = InputSample()
    renderer = SceneRenderer()
    driver = FrameDriver(scene, sample, max_dt=sim_config['max_frame_dt'])

    run_loop(
        scene, sample, driver, renderer, window, canvas, clock,
        fps=display_config.get('fps', 60),
        log_interval=sim_config.get('log_interval_ticks', 300)
    )

    logger.info(f"Application shutting down after {driver.ticks} ticks.")
    pygame.quit()

if __name__ == "__main__":
    main()
