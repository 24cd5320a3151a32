# -- SPH Force Accumulation and Integration -- #

'''
Pressure and viscosity forces, velocity update, and position update.

For particle i the acceleration starts at gravity (0, g) and adds,
for every candidate j != i with 0 < r_ij <= h:

    pressure:   grad_W_spiky(r_i - r_j) * (-m * (p_i + p_j) / (2 * rho_j)) / rho_j
    viscosity:  (v_j - v_i) * mu * lap_W_visc(r_ij) / rho_j

Two force schemes are available:

sequential (default)
    Particles are visited in index order and v_i += a_i * dt is
    written immediately. A neighbor j < i therefore enters the
    viscosity term with its velocity from this pass, a neighbor
    j > i with its velocity from the previous step (Gauss-Seidel
    style coupling).

snapshot
    Every particle reads velocities from a frozen copy taken before
    the pass, and new velocities are written only when all
    accelerations are known (Jacobi style). Fully vectorized over
    unique pairs. Trajectories differ from the sequential scheme.

Neighbors whose density is at or below config.densityEpsilon are
skipped: an isolated particle can reach zero density and dividing by
it would put NaN into the positions. Skips are counted and logged.

After all velocities are final: drift, wall reflection, speed cap,
drag, in that order.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications

Sean Bowman [02/14/2026]
'''

from __future__ import annotations

import logging

import numpy as np

from FluidSim.sph.protocols import SimulationConfig
from FluidSim.sph.kernels import spikyGradBatch, viscLaplacianBatch
from FluidSim.sph.particles import ParticleSystem
from FluidSim.sph.neighborSearch import NeighborSearch
from FluidSim.sph.boundaryHandling import WallBoundary
from FluidSim.sph.timeIntegration import SymplecticEuler, clampSpeed, applyDrag

logger = logging.getLogger(__name__)


class ForceIntegrator:
    '''
    Computes accelerations, updates velocities, then advances positions.

    Parameters:
    -----------
    config : SimulationConfig
        Simulation configuration
    boundary : WallBoundary | None
        Reflecting walls (defaults to the walls described by config)
    '''

    def __init__(
        self,
        config: SimulationConfig,
        boundary: WallBoundary | None = None,
    ) -> None:
        self._config = config
        self._boundary = boundary or WallBoundary.fromConfig(config)
        self._integrator = SymplecticEuler()
        self._gravity = np.array([0.0, config.gravity])
        self._guardedPairs = 0

    @property
    def guardedPairs(self) -> int:
        '''Contributions skipped by the density guard in the last force pass.'''
        return self._guardedPairs

    @property
    def boundary(self) -> WallBoundary:
        '''The reflecting walls.'''
        return self._boundary

    ######################################################################
    # -- Sequential Scheme -- #
    ######################################################################

    def applyForces(self, particles: ParticleSystem, grid: NeighborSearch) -> None:
        '''
        Accumulate forces and update velocities in index order, in place.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system with a completed density field
        grid : NeighborSearch
            Grid built from particles.positions
        '''
        cfg = self._config
        h = cfg.smoothingRadius
        mass = cfg.particleMass
        dt = cfg.timeStep
        eps = cfg.densityEpsilon

        positions = particles.positions
        velocities = particles.velocities
        densities = particles.densities
        pressures = particles.pressures

        guarded = 0

        for i in range(particles.nParticles):
            acc = self._gravity.copy()

            candidates = grid.nearby(positions[i])
            candidates = candidates[candidates != i]

            if len(candidates) > 0:
                dr = positions[i] - positions[candidates]
                dist = np.sqrt(np.sum(dr * dr, axis=1))

                inRange = (dist > 0.0) & (dist <= h)
                rhoJ = densities[candidates]
                usable = rhoJ > eps
                guarded += int(np.count_nonzero(inRange & ~usable))

                keep = inRange & usable
                if np.any(keep):
                    j = candidates[keep]
                    dr = dr[keep]
                    dist = dist[keep]
                    rhoJ = rhoJ[keep]

                    # Pressure
                    pressureTerm = -mass * (pressures[i] + pressures[j]) / (2.0 * rhoJ)
                    grad = spikyGradBatch(dr, dist, h)
                    acc += np.sum(grad * (pressureTerm / rhoJ)[:, np.newaxis], axis=0)

                    # Viscosity, reading v_j as it is right now
                    dv = velocities[j] - velocities[i]
                    visc = cfg.viscosity * viscLaplacianBatch(dist, h)
                    acc += np.sum(dv * (visc / rhoJ)[:, np.newaxis], axis=0)

            velocities[i] += acc * dt

        self._recordGuarded(guarded)

    ######################################################################
    # -- Snapshot Scheme -- #
    ######################################################################

    def applyForcesSnapshot(
        self,
        particles: ParticleSystem,
        pairs: tuple[np.ndarray, np.ndarray],
    ) -> None:
        '''
        Accumulate forces from frozen velocities, then kick all particles.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system with a completed density field
        pairs : tuple[np.ndarray, np.ndarray]
            (iIndices, jIndices) from SpatialHashGrid.queryPairs(h)
        '''
        cfg = self._config
        h = cfg.smoothingRadius
        mass = cfg.particleMass
        eps = cfg.densityEpsilon

        accelerations = np.tile(self._gravity, (particles.nParticles, 1))
        guarded = 0

        iIdx, jIdx = pairs
        if len(iIdx) > 0:
            frozenVel = particles.velocities.copy()

            dr = particles.positions[iIdx] - particles.positions[jIdx]
            dist = np.linalg.norm(dr, axis=1)

            inRange = (dist > 0.0) & (dist <= h)
            iIdx, jIdx = iIdx[inRange], jIdx[inRange]
            dr, dist = dr[inRange], dist[inRange]

            rhoI = particles.densities[iIdx]
            rhoJ = particles.densities[jIdx]
            pressureSum = particles.pressures[iIdx] + particles.pressures[jIdx]

            grad = spikyGradBatch(dr, dist, h)
            visc = cfg.viscosity * viscLaplacianBatch(dist, h)
            dvJI = frozenVel[jIdx] - frozenVel[iIdx]

            # Guarded divisors are replaced by 1 and their rows masked out
            usableJ = rhoJ > eps
            usableI = rhoI > eps
            guarded = int(np.count_nonzero(~usableJ) + np.count_nonzero(~usableI))
            safeRhoJ = np.where(usableJ, rhoJ, 1.0)
            safeRhoI = np.where(usableI, rhoI, 1.0)

            # Contribution to i uses rho_j and grad(r_i - r_j)
            coeffI = (-mass * pressureSum / (2.0 * safeRhoJ)) / safeRhoJ
            accI = grad * coeffI[:, np.newaxis] + dvJI * (visc / safeRhoJ)[:, np.newaxis]
            accI[~usableJ] = 0.0

            # Contribution to j uses rho_i and grad(r_j - r_i) = -grad
            coeffJ = (-mass * pressureSum / (2.0 * safeRhoI)) / safeRhoI
            accJ = -grad * coeffJ[:, np.newaxis] - dvJI * (visc / safeRhoI)[:, np.newaxis]
            accJ[~usableI] = 0.0

            np.add.at(accelerations, iIdx, accI)
            np.add.at(accelerations, jIdx, accJ)

        self._integrator.kick(particles, accelerations, cfg.timeStep)
        self._recordGuarded(guarded)

    ######################################################################
    # -- Position Update -- #
    ######################################################################

    def integrate(self, particles: ParticleSystem) -> None:
        '''
        Advance positions and apply walls, speed cap, and drag.

        Runs after every velocity of the step is final.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system to advance
        '''
        self._integrator.drift(particles, self._config.timeStep)
        self._boundary.enforceBoundary(particles)
        clampSpeed(particles.velocities, self._config.maxSpeed)
        applyDrag(particles.velocities, self._config.dragFactor)

    def _recordGuarded(self, guarded: int) -> None:
        self._guardedPairs = guarded
        if guarded:
            logger.warning(
                'Skipped %d neighbor contribution(s) with density <= %g',
                guarded, self._config.densityEpsilon,
            )
