"""Headless smoke tests for the pygame renderer."""
import pygame
import pytest

from constants import WIDTH, HEIGHT
from frame_driver import FrameDriver
from renderer import SceneRenderer
from scene import Phase


@pytest.fixture(scope="module")
def renderer():
    pygame.init()
    yield SceneRenderer()
    pygame.quit()


@pytest.fixture
def canvas(renderer):
    return pygame.Surface((WIDTH, HEIGHT))


def test_static_layers_match_scene_size(renderer):
    assert renderer.background.get_size() == (WIDTH, HEIGHT)
    assert renderer.canyon.get_size() == (WIDTH, HEIGHT)


def test_draws_start_screen(renderer, canvas, scene):
    renderer.draw(canvas, scene)
    # The floor is drawn opaque in the foreground color.
    assert tuple(canvas.get_at((WIDTH // 2, HEIGHT - 3)))[:3] == (11, 11, 16)


def test_draws_streaming_scene(renderer, canvas, scene, sample):
    driver = FrameDriver(scene, sample, start_time=0.0)
    sample.press(150.0, 250.0)
    for _ in range(90):
        driver.step(1 / 60)
    scene.particles.splash(120.0, 200.0, 0.0, 0.0, 1.0)
    scene.particles.add_ripple(120.0, 340.0)
    assert scene.phase is Phase.ZEN
    renderer.draw(canvas, scene)


@pytest.mark.parametrize("outro_t", [0.0, 0.5, 2.0, 3.5])
def test_draws_outro(renderer, canvas, scene, outro_t):
    scene.phase = Phase.DONE
    scene.run.outro_t = outro_t
    renderer.draw(canvas, scene)


def test_draws_hint_before_first_stream(renderer, canvas, scene):
    scene.phase = Phase.ZEN
    scene.run.overlay = 0.0
    renderer.draw(canvas, scene)
