# -- SPH Particle System -- #

'''
Dataclass representing the SPH particle system state.

Stores positions, velocities, densities, and pressures as contiguous
NumPy arrays for vectorized operations. All particles share one mass.
A particle's identity is its row index, which never changes during a
run: particles are neither added nor removed.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from FluidSim.sph.protocols import SimulationConfig


@dataclass(frozen=True)
class ParticleSnapshot:
    '''
    Read-only copy of one particle, handed to drawing code.

    Parameters:
    -----------
    index : int
        Particle index
    position : tuple[float, float]
        Position [px]
    velocity : tuple[float, float]
        Velocity [px/s]
    density : float
        Density from the last density pass
    pressure : float
        Pressure from the last density pass
    '''

    index: int
    position: tuple[float, float]
    velocity: tuple[float, float]
    density: float
    pressure: float

    @property
    def speed(self) -> float:
        '''Velocity magnitude [px/s].'''
        return math.hypot(self.velocity[0], self.velocity[1])


@dataclass
class ParticleSystem:
    '''
    SPH particle system state.

    Vector quantities have shape (N, 2), scalar quantities (N,).
    Densities and pressures hold no meaning until the first
    density pass has run.

    Parameters:
    -----------
    positions : np.ndarray
        Particle positions [px], shape (N, 2)
    velocities : np.ndarray
        Particle velocities [px/s], shape (N, 2)
    densities : np.ndarray
        Particle densities, shape (N,)
    pressures : np.ndarray
        Particle pressures, shape (N,)
    mass : float
        Mass shared by every particle
    '''

    positions: np.ndarray
    velocities: np.ndarray
    densities: np.ndarray
    pressures: np.ndarray
    mass: float

    def __post_init__(self) -> None:
        n = self.positions.shape[0]
        if self.positions.shape != (n, 2) or self.velocities.shape != (n, 2):
            raise ValueError(
                f'positions and velocities must have shape (N, 2), got '
                f'{self.positions.shape} and {self.velocities.shape}'
            )
        if self.densities.shape != (n,) or self.pressures.shape != (n,):
            raise ValueError('densities and pressures must have shape (N,)')

    @property
    def nParticles(self) -> int:
        '''Number of particles.'''
        return self.positions.shape[0]

    def speeds(self) -> np.ndarray:
        '''Velocity magnitudes [px/s], shape (N,).'''
        return np.linalg.norm(self.velocities, axis=1)

    def kineticEnergy(self) -> float:
        '''
        Total kinetic energy.

        KE = (1/2) * sum_i m * |v_i|^2

        Returns:
        --------
        float : Kinetic energy
        '''
        speedsSq = np.sum(self.velocities * self.velocities, axis=1)
        return float(0.5 * self.mass * np.sum(speedsSq))

    def maxSpeed(self) -> float:
        '''Largest particle speed [px/s].'''
        if self.nParticles == 0:
            return 0.0
        return float(np.max(self.speeds()))

    def snapshot(self, index: int) -> ParticleSnapshot:
        '''Read-only copy of particle `index`.'''
        return ParticleSnapshot(
            index=index,
            position=(float(self.positions[index, 0]), float(self.positions[index, 1])),
            velocity=(float(self.velocities[index, 0]), float(self.velocities[index, 1])),
            density=float(self.densities[index]),
            pressure=float(self.pressures[index]),
        )

    def copy(self) -> ParticleSystem:
        '''Deep copy of the particle arrays.'''
        return ParticleSystem(
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
            densities=self.densities.copy(),
            pressures=self.pressures.copy(),
            mass=self.mass,
        )

    ######################################################################
    # -- Construction -- #
    ######################################################################

    @classmethod
    def fromPositions(
        cls,
        positions: np.ndarray,
        mass: float,
        velocities: np.ndarray | None = None,
    ) -> ParticleSystem:
        '''
        Create a particle system from explicit positions.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions [px], shape (N, 2)
        mass : float
            Particle mass
        velocities : np.ndarray | None
            Initial velocities [px/s], zero if omitted

        Returns:
        --------
        ParticleSystem : New particle system
        '''
        positions = np.array(positions, dtype=float).reshape(-1, 2)
        nParticles = positions.shape[0]

        if velocities is None:
            velocities = np.zeros((nParticles, 2))
        else:
            velocities = np.array(velocities, dtype=float).reshape(-1, 2)

        return cls(
            positions=positions,
            velocities=velocities,
            densities=np.zeros(nParticles),
            pressures=np.zeros(nParticles),
            mass=mass,
        )

    @classmethod
    def createLattice(cls, config: SimulationConfig) -> ParticleSystem:
        '''
        Create the deterministic initial layout.

        Particles fill a square lattice row by row starting at
        config.latticeOrigin with config.latticeSpacing. The lattice
        has floor(sqrt(N)) columns; a final partial row holds any
        remainder. All velocities start at zero.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration

        Returns:
        --------
        ParticleSystem : Initialized particle system
        '''
        nParticles = config.particleCount
        cols = max(1, int(math.sqrt(nParticles)))

        indices = np.arange(nParticles)
        rowIdx = indices // cols
        colIdx = indices % cols

        originX, originY = config.latticeOrigin
        positions = np.column_stack([
            originX + colIdx * config.latticeSpacing,
            originY + rowIdx * config.latticeSpacing,
        ]).astype(float)

        return cls.fromPositions(positions, mass=config.particleMass)
