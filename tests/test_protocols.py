# -- Configuration Tests -- #

'''
SimulationConfig presets, validation, and JSON loading.

Sean Bowman [02/18/2026]
'''

import dataclasses
import json
from pathlib import Path

import pytest

from FluidSim import constants as const
from FluidSim.sph.protocols import SimulationConfig

CONFIG_DIR = Path(__file__).parent.parent / 'FluidSim' / 'configs'


def testPrototypeMatchesConstants(prototypeConfig):
    assert prototypeConfig.particleCount == 1000
    assert prototypeConfig.smoothingRadius == 16.0
    assert prototypeConfig.timeStep == 0.0015
    assert prototypeConfig.gravity == 3000.0
    assert (prototypeConfig.domainWidth, prototypeConfig.domainHeight) == (800.0, 400.0)
    assert prototypeConfig.wallMargin == 5.0
    assert prototypeConfig.maxSpeed == 1000.0
    assert prototypeConfig.dragFactor == 0.995
    assert prototypeConfig.substeps == 5
    assert prototypeConfig.forceScheme == 'sequential'


def testConfigIsFrozen(prototypeConfig):
    with pytest.raises(dataclasses.FrozenInstanceError):
        prototypeConfig.gravity = 0.0


def testCellSizeEqualsSmoothingRadius(prototypeConfig):
    assert prototypeConfig.cellSize == prototypeConfig.smoothingRadius


def testWallBounds(prototypeConfig):
    assert prototypeConfig.wallBounds == (5.0, 795.0, 5.0, 395.0)


@pytest.mark.parametrize('field, value', [
    ('particleCount', 0),
    ('smoothingRadius', 0.0),
    ('particleMass', -1.0),
    ('timeStep', 0.0),
    ('domainWidth', -800.0),
    ('maxSpeed', 0.0),
    ('dragFactor', 0.0),
    ('dragFactor', 1.5),
    ('substeps', 0),
    ('densityEpsilon', -1.0),
    ('wallMargin', -1.0),
    ('wallMargin', 250.0),
    ('forceScheme', 'parallel'),
])
def testInvalidFieldsRaise(prototypeConfig, field, value):
    with pytest.raises(ValueError, match=field if field != 'forceScheme' else 'force scheme'):
        dataclasses.replace(prototypeConfig, **{field: value})


def testFromJsonReadsShippedPrototype(prototypeConfig):
    loaded = SimulationConfig.fromJson(str(CONFIG_DIR / 'prototype.json'))
    assert loaded == prototypeConfig


def testFromDictFallsBackToDefaults():
    config = SimulationConfig.fromDict({'simulation': {'particleCount': 64}})

    assert config.particleCount == 64
    assert config.restDensity == const.restDensity
    assert config.latticeOrigin == const.latticeOrigin


def testDictRoundTrip(tmp_path):
    config = dataclasses.replace(
        SimulationConfig.small(), forceScheme='snapshot', latticeOrigin=(100.0, 20.0),
    )
    path = tmp_path / 'config.json'
    path.write_text(json.dumps(config.toDict()))

    assert SimulationConfig.fromJson(str(path)) == config


def testMissingConfigFileRaises(tmp_path):
    with pytest.raises(FileNotFoundError):
        SimulationConfig.fromJson(str(tmp_path / 'missing.json'))
