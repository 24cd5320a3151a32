# -- Shared Test Fixtures -- #

'''
Fixtures shared by the FluidSim test modules.

Sean Bowman [02/17/2026]
'''

import dataclasses

import numpy as np
import pytest

from FluidSim.sph.protocols import SimulationConfig
from FluidSim.sph.particles import ParticleSystem


@pytest.fixture
def prototypeConfig() -> SimulationConfig:
    return SimulationConfig.prototype()


@pytest.fixture
def smallConfig() -> SimulationConfig:
    return SimulationConfig.small()


def singleParticleConfig(**overrides) -> SimulationConfig:
    '''Prototype physics with one particle.'''
    config = dataclasses.replace(SimulationConfig.prototype(), particleCount=1)
    return dataclasses.replace(config, **overrides) if overrides else config


def particlesAt(positions, config: SimulationConfig, velocities=None) -> ParticleSystem:
    '''Particle system at explicit positions with the config's mass.'''
    return ParticleSystem.fromPositions(
        np.asarray(positions, dtype=float),
        mass=config.particleMass,
        velocities=velocities,
    )
