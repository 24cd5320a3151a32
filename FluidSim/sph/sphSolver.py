# -- 2D SPH Simulation Driver -- #

'''
Simulation driver for the 2D SPH fluid.

Owns the particle system and the spatial grid and sequences the
per-step pipeline:

    1. Rebuild the spatial hash grid from current positions
    2. Density and pressure for every particle
    3. Forces and velocity update for every particle
    4. Position update, wall reflection, speed cap, drag

Each phase finishes for all particles before the next begins, so
callers never observe a partial step. The timestep is fixed.

advanceFrame() runs several steps per externally observed frame and
records the kinetic energy in a bounded history for overlays.

Sean Bowman [02/14/2026]
'''

from __future__ import annotations

from typing import Iterator

import numpy as np

from FluidSim.sph.protocols import SimulationConfig, SimulationState
from FluidSim.sph.particles import ParticleSnapshot, ParticleSystem
from FluidSim.sph.neighborSearch import SpatialHashGrid
from FluidSim.sph.densityEstimator import DensityEstimator
from FluidSim.sph.forceIntegrator import ForceIntegrator
from FluidSim.sph.boundaryHandling import WallBoundary
from FluidSim.sph.energyHistory import EnergyHistory


def _readOnly(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class SphSolver:
    '''
    2D SPH solver with a fixed timestep.

    Parameters:
    -----------
    config : SimulationConfig
        Simulation configuration
    particles : ParticleSystem | None
        Initial particles; defaults to the square lattice described
        by config. Must hold exactly config.particleCount particles.
        The solver works on its own copy.
    boundary : WallBoundary | None
        Reflecting walls; defaults to the walls described by config
    '''

    def __init__(
        self,
        config: SimulationConfig,
        particles: ParticleSystem | None = None,
        boundary: WallBoundary | None = None,
    ) -> None:
        if particles is None:
            particles = ParticleSystem.createLattice(config)
        elif particles.nParticles != config.particleCount:
            raise ValueError(
                f'Expected {config.particleCount} particles, got {particles.nParticles}'
            )
        elif particles.mass != config.particleMass:
            raise ValueError(
                f'Particle mass {particles.mass} does not match config {config.particleMass}'
            )

        self._config = config
        self._particles = particles.copy()
        self._grid = SpatialHashGrid(cellSize=config.cellSize)
        self._densityEstimator = DensityEstimator(config)
        self._forceIntegrator = ForceIntegrator(config, boundary=boundary)
        self._energyHistory = EnergyHistory(capacity=int(config.domainWidth))

        self._time: float = 0.0
        self._step: int = 0

    ######################################################################
    # -- Main Time Step -- #
    ######################################################################

    def step(self) -> None:
        '''Advance the simulation by exactly one timestep.'''
        p = self._particles

        # 1. Rebuild grid from current positions
        self._grid.insert(p.positions)

        if self._config.forceScheme == 'snapshot':
            pairs = self._grid.queryPairs(self._config.smoothingRadius)

            # 2. Density and pressure
            self._densityEstimator.computeFromPairs(p, pairs)

            # 3. Forces from frozen velocities, then kick
            self._forceIntegrator.applyForcesSnapshot(p, pairs)
        else:
            # 2. Density and pressure
            self._densityEstimator.compute(p, self._grid)

            # 3. Forces with in-place velocity update
            self._forceIntegrator.applyForces(p, self._grid)

        # 4. Drift, walls, speed cap, drag
        self._forceIntegrator.integrate(p)

        self._time += self._config.timeStep
        self._step += 1

    def advanceFrame(self, nSubsteps: int | None = None) -> SimulationState:
        '''
        Run several steps for one external frame.

        Parameters:
        -----------
        nSubsteps : int | None
            Steps to run (defaults to config.substeps)

        Returns:
        --------
        SimulationState : State after the last step
        '''
        if nSubsteps is None:
            nSubsteps = self._config.substeps
        if nSubsteps < 1:
            raise ValueError(f'nSubsteps must be >= 1, got {nSubsteps}')

        for _ in range(nSubsteps):
            self.step()

        state = self.currentState
        self._energyHistory.append(state.kineticEnergy)
        return state

    ######################################################################
    # -- Diagnostics -- #
    ######################################################################

    def totalKineticEnergy(self) -> float:
        '''
        Total kinetic energy sum_i 0.5 * m * |v_i|^2.

        Returns:
        --------
        float : Kinetic energy
        '''
        return self._particles.kineticEnergy()

    @property
    def currentState(self) -> SimulationState:
        '''Current simulation state snapshot.'''
        p = self._particles
        hasDensity = self._step > 0

        return SimulationState(
            time=self._time,
            step=self._step,
            kineticEnergy=p.kineticEnergy(),
            maxVelocity=p.maxSpeed(),
            meanDensity=float(np.mean(p.densities)) if hasDensity else 0.0,
            maxDensity=float(np.max(p.densities)) if hasDensity else 0.0,
            guardedPairs=self._forceIntegrator.guardedPairs,
        )

    ######################################################################
    # -- Read-only Access -- #
    ######################################################################

    def iterParticles(self) -> Iterator[ParticleSnapshot]:
        '''Yield a read-only snapshot of every particle in index order.'''
        for i in range(self._particles.nParticles):
            yield self._particles.snapshot(i)

    @property
    def positions(self) -> np.ndarray:
        '''Particle positions [px], read-only view, shape (N, 2).'''
        return _readOnly(self._particles.positions)

    @property
    def velocities(self) -> np.ndarray:
        '''Particle velocities [px/s], read-only view, shape (N, 2).'''
        return _readOnly(self._particles.velocities)

    @property
    def densities(self) -> np.ndarray:
        '''Particle densities, read-only view, shape (N,).'''
        return _readOnly(self._particles.densities)

    @property
    def pressures(self) -> np.ndarray:
        '''Particle pressures, read-only view, shape (N,).'''
        return _readOnly(self._particles.pressures)

    @property
    def particles(self) -> ParticleSystem:
        '''Access the particle system.'''
        return self._particles

    @property
    def config(self) -> SimulationConfig:
        '''Simulation configuration.'''
        return self._config

    @property
    def grid(self) -> SpatialHashGrid:
        '''Spatial grid as built at the start of the last step.'''
        return self._grid

    @property
    def energyHistory(self) -> EnergyHistory:
        '''Kinetic energy recorded by advanceFrame().'''
        return self._energyHistory

    @property
    def time(self) -> float:
        '''Simulated time [s].'''
        return self._time

    @property
    def stepCount(self) -> int:
        '''Number of completed steps.'''
        return self._step
