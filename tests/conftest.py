"""Shared fixtures: the repository's simulation config, a seeded RNG and a fresh scene."""
import json
import os

# Renderer tests run without a display.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from input_state import InputSample
from scene import Scene

CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "config.json")


@pytest.fixture
def sim_config():
    with open(CONFIG_PATH, "r") as f:
        return json.load(f)["simulation"]


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def scene(sim_config, rng):
    return Scene(sim_config, rng)


@pytest.fixture
def sample():
    return InputSample()
