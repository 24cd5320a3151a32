# -- SPH Boundary Conditions -- #

'''
Reflecting walls for the rectangular simulation domain.

Four walls sit a fixed margin inside the domain edges. A particle
that ends a drift beyond a wall is moved back onto the wall and the
wall-normal velocity component is reversed and damped:

    x < xMin  ->  x = xMin,  vx *= -0.5
    x > xMax  ->  x = xMax,  vx *= -0.5

and likewise for y. The axes are handled independently, so a particle
in a corner is reflected on both. Wall contact is a stability policy,
not an error, and is never reported.

Sean Bowman [02/13/2026]
'''

from __future__ import annotations

import numpy as np

from FluidSim import constants as const
from FluidSim.sph.protocols import SimulationConfig
from FluidSim.sph.particles import ParticleSystem


class WallBoundary:
    '''
    Axis-aligned reflecting walls.

    Parameters:
    -----------
    xMin, xMax : float
        Left and right wall positions [px]
    yMin, yMax : float
        Top and bottom wall positions [px] (screen coordinates)
    restitution : float
        Factor applied to the wall-normal velocity on contact
    '''

    def __init__(
        self,
        xMin: float,
        xMax: float,
        yMin: float,
        yMax: float,
        restitution: float = const.wallRestitution,
    ) -> None:
        if xMin >= xMax or yMin >= yMax:
            raise ValueError(
                f'Empty wall box: x [{xMin}, {xMax}], y [{yMin}, {yMax}]'
            )

        self._lower = np.array([xMin, yMin], dtype=float)
        self._upper = np.array([xMax, yMax], dtype=float)
        self._restitution = restitution

    @classmethod
    def fromConfig(cls, config: SimulationConfig) -> WallBoundary:
        '''Walls at config.wallMargin inside the domain edges.'''
        xMin, xMax, yMin, yMax = config.wallBounds
        return cls(xMin, xMax, yMin, yMax)

    def enforceBoundary(self, particles: ParticleSystem) -> None:
        '''
        Clamp positions to the wall box and reflect velocities.

        Parameters:
        -----------
        particles : ParticleSystem
            The particle system to enforce boundaries on
        '''
        positions = particles.positions
        velocities = particles.velocities

        for d in range(2):
            belowMin = positions[:, d] < self._lower[d]
            positions[belowMin, d] = self._lower[d]
            velocities[belowMin, d] *= self._restitution

            aboveMax = positions[:, d] > self._upper[d]
            positions[aboveMax, d] = self._upper[d]
            velocities[aboveMax, d] *= self._restitution
