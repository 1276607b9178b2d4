"""Shared pytest fixtures for all test modules."""
import logging

import numpy as np
import pytest

from scene_generator.generator import SceneGenerator
from scene_generator.host import InMemoryScene
from scene_generator.styles import EnvironmentStyle, WorldSize


# === Logging Fixtures ===

@pytest.fixture
def logger():
    """Logger shared by components under test; propagates to caplog."""
    return logging.getLogger("scene_generator.tests")


# === Generator Fixtures ===

@pytest.fixture
def generator(logger):
    """Generator with a fixed random source."""
    return SceneGenerator({"random_seed": 1234}, logger)


@pytest.fixture
def make_generator(logger):
    """Factory for generators with config overrides and a fixed random source."""
    def _make(**overrides):
        config = {"random_seed": 1234}
        config.update(overrides)
        return SceneGenerator(config, logger)
    return _make


@pytest.fixture
def snow_heightmap(generator):
    """Medium snow terrain: tall enough that most tree candidates survive."""
    return generator.generate_heightmap(EnvironmentStyle.SNOW, WorldSize.MEDIUM, seed=321.5)


# === Host Scene Fixtures ===

@pytest.fixture
def scene(logger):
    """Empty in-memory host scene supporting every primitive kind."""
    return InMemoryScene(logger=logger)


@pytest.fixture
def quiet_config():
    """Builder config with a fixed random source and no progress bar."""
    return {"random_seed": 99, "show_progress": False}


@pytest.fixture
def flat_heights():
    """A 5x5 grid rising linearly along x from 0 to 0.4."""
    return np.tile(np.linspace(0.0, 0.4, 5), (5, 1))
