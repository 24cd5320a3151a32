# -- Energy History Tests -- #

'''
Bounded FIFO behaviour and normalization of the energy history.

Sean Bowman [02/18/2026]
'''

import numpy as np
import pytest

from FluidSim.sph.energyHistory import EnergyHistory


def testDropsOldestWhenFull():
    history = EnergyHistory(capacity=3)
    for value in (1.0, 2.0, 3.0, 4.0):
        history.append(value)

    assert len(history) == 3
    assert history.values.tolist() == [2.0, 3.0, 4.0]


def testDefaultCapacityIsWindowWidth():
    assert EnergyHistory().capacity == 800


def testMaxValueDefaultsToOne():
    history = EnergyHistory()
    assert history.maxValue == 1.0

    history.append(0.0)
    assert history.maxValue == 1.0


def testNormalized():
    history = EnergyHistory()
    for value in (2.0, 8.0, 4.0):
        history.append(value)

    np.testing.assert_allclose(history.normalized(), [0.25, 1.0, 0.5])


def testClear():
    history = EnergyHistory()
    history.append(5.0)
    history.clear()
    assert len(history) == 0


def testRejectsZeroCapacity():
    with pytest.raises(ValueError):
        EnergyHistory(capacity=0)
