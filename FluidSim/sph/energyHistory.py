# -- Kinetic Energy History -- #

'''
Bounded history of kinetic energy samples, one per frame.

Keeps the most recent samples only; the oldest sample is dropped once
the capacity is reached. normalized() scales the samples by their
maximum (1.0 when the history is empty or all zero) for plotting.

Sean Bowman [02/14/2026]
'''

from __future__ import annotations

from collections import deque

import numpy as np

from FluidSim import constants as const


class EnergyHistory:
    '''
    Fixed-capacity FIFO of energy samples.

    Parameters:
    -----------
    capacity : int
        Maximum number of samples kept
    '''

    def __init__(self, capacity: int = const.energyHistoryLength) -> None:
        if capacity < 1:
            raise ValueError(f'capacity must be >= 1, got {capacity}')
        self._samples: deque[float] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def capacity(self) -> int:
        '''Maximum number of samples kept.'''
        return self._samples.maxlen

    def append(self, energy: float) -> None:
        '''Record one sample, dropping the oldest when full.'''
        self._samples.append(float(energy))

    def clear(self) -> None:
        '''Drop all samples.'''
        self._samples.clear()

    @property
    def values(self) -> np.ndarray:
        '''Samples, oldest first.'''
        return np.array(self._samples, dtype=float)

    @property
    def maxValue(self) -> float:
        '''Largest sample, or 1.0 if there is none above zero.'''
        if not self._samples:
            return 1.0
        peak = max(self._samples)
        return peak if peak > 0.0 else 1.0

    def normalized(self) -> np.ndarray:
        '''Samples divided by maxValue.'''
        return self.values / self.maxValue
