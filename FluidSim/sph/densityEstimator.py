# -- SPH Density and Pressure Estimation -- #

'''
Density summation and equation of state for the SPH pipeline.

    rho_i = sum_j m * W_poly6(|r_i - r_j|, h)
    p_i   = k * (rho_i - rho_0)

The sum runs over the grid's 3x3 candidate block of particle i,
including i itself (W_poly6(0, h) > 0). Candidates beyond h add
nothing because the kernel is zero there. Pressures are not clamped:
a particle below rest density has negative pressure.

The whole field is written before any force is computed; the force
pass only ever sees a completed density field.

Sean Bowman [02/13/2026]
'''

from __future__ import annotations

import numpy as np

from FluidSim.sph.protocols import SimulationConfig
from FluidSim.sph.kernels import poly6, poly6Batch
from FluidSim.sph.particles import ParticleSystem
from FluidSim.sph.neighborSearch import NeighborSearch


class DensityEstimator:
    '''
    Computes per-particle density and pressure.

    Parameters:
    -----------
    config : SimulationConfig
        Simulation configuration (h, mass, rest density, gas constant)
    '''

    def __init__(self, config: SimulationConfig) -> None:
        self._config = config
        self._selfDensity = config.particleMass * poly6(0.0, config.smoothingRadius)

    @property
    def selfDensity(self) -> float:
        '''Density of an isolated particle, m * W_poly6(0, h).'''
        return self._selfDensity

    def pressureFromDensity(self, densities: np.ndarray) -> np.ndarray:
        '''
        Linear equation of state p = k * (rho - rho_0).

        Parameters:
        -----------
        densities : np.ndarray
            Particle densities, shape (N,)

        Returns:
        --------
        np.ndarray : Pressures, shape (N,)
        '''
        return self._config.gasConstant * (densities - self._config.restDensity)

    def compute(self, particles: ParticleSystem, grid: NeighborSearch) -> None:
        '''
        Fill particles.densities and particles.pressures.

        Scans particles in index order and sums over each one's
        grid candidates. The grid must have been built from the
        current positions.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system (densities and pressures are overwritten)
        grid : NeighborSearch
            Grid built from particles.positions
        '''
        h = self._config.smoothingRadius
        mass = self._config.particleMass
        positions = particles.positions
        densities = np.empty(particles.nParticles)

        for i in range(particles.nParticles):
            candidates = grid.nearby(positions[i])
            dr = positions[i] - positions[candidates]
            dist = np.sqrt(np.sum(dr * dr, axis=1))
            densities[i] = mass * np.sum(poly6Batch(dist, h))

        particles.densities[:] = densities
        particles.pressures[:] = self.pressureFromDensity(densities)

    def computeFromPairs(
        self,
        particles: ParticleSystem,
        pairs: tuple[np.ndarray, np.ndarray],
    ) -> None:
        '''
        Fill densities and pressures from a unique pair list.

        Vectorized equivalent of compute(): self-contribution plus a
        symmetric scatter-add over pairs within h. Results agree with
        compute() up to floating-point summation order.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system (densities and pressures are overwritten)
        pairs : tuple[np.ndarray, np.ndarray]
            (iIndices, jIndices) from SpatialHashGrid.queryPairs(h)
        '''
        h = self._config.smoothingRadius
        mass = self._config.particleMass

        densities = np.full(particles.nParticles, self._selfDensity)

        iIdx, jIdx = pairs
        if len(iIdx) > 0:
            dr = particles.positions[iIdx] - particles.positions[jIdx]
            dist = np.linalg.norm(dr, axis=1)
            contrib = mass * poly6Batch(dist, h)

            np.add.at(densities, iIdx, contrib)
            np.add.at(densities, jIdx, contrib)

        particles.densities[:] = densities
        particles.pressures[:] = self.pressureFromDensity(densities)
