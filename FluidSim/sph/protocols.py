# -- SPH Simulation Protocols -- #

'''
Configuration, state dataclasses, and the solver protocol for the
2D SPH fluid prototype.

SimulationConfig is frozen: one instance describes one run, and
several simulations with different parameters can coexist.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterator, Protocol, TYPE_CHECKING

from FluidSim import constants as const

if TYPE_CHECKING:
    from FluidSim.sph.particles import ParticleSnapshot, ParticleSystem


# Supported force accumulation schemes
FORCE_SCHEMES = ('sequential', 'snapshot')


######################################################################
# -- Simulation Configuration -- #
######################################################################

@dataclass(frozen=True)
class SimulationConfig:
    '''
    Configuration for an SPH simulation.

    Required fields mirror the physical setup; the remaining fields
    carry the stability policy and the initial layout and default to
    the values in FluidSim.constants.

    Parameters:
    -----------
    particleCount : int
        Number of particles (fixed for the run)
    restDensity : float
        Rest density rho_0
    gasConstant : float
        Gas constant k in p = k * (rho - rho_0)
    viscosity : float
        Viscosity coefficient mu
    smoothingRadius : float
        Smoothing radius h [px], also the grid cell size
    particleMass : float
        Mass of each particle
    timeStep : float
        Fixed time step [s]
    gravity : float
        Gravity magnitude along +y [px/s^2]
    domainWidth : float
        Domain width [px]
    domainHeight : float
        Domain height [px]
    wallMargin : float
        Distance of the reflecting walls from the domain edge [px]
    maxSpeed : float
        Speed cap [px/s]
    dragFactor : float
        Velocity multiplier applied every step, in (0, 1]
    latticeOrigin : tuple[float, float]
        First lattice site of the initial layout [px]
    latticeSpacing : float
        Spacing of the initial square lattice [px]
    substeps : int
        Steps run per external frame by SphSolver.advanceFrame
    densityEpsilon : float
        Neighbor densities at or below this value are skipped in the force sums
    forceScheme : str
        'sequential' or 'snapshot'
    '''

    particleCount: int
    restDensity: float
    gasConstant: float
    viscosity: float
    smoothingRadius: float
    particleMass: float
    timeStep: float
    gravity: float
    domainWidth: float
    domainHeight: float
    wallMargin: float = const.wallMargin
    maxSpeed: float = const.maxSpeed
    dragFactor: float = const.dragFactor
    latticeOrigin: tuple[float, float] = const.latticeOrigin
    latticeSpacing: float = const.latticeSpacing
    substeps: int = const.substeps
    densityEpsilon: float = const.densityEpsilon
    forceScheme: str = const.forceScheme

    def __post_init__(self) -> None:
        if self.particleCount < 1:
            raise ValueError(f'particleCount must be >= 1, got {self.particleCount}')

        for name in (
            'smoothingRadius', 'particleMass', 'timeStep',
            'domainWidth', 'domainHeight', 'maxSpeed', 'latticeSpacing',
        ):
            value = getattr(self, name)
            if not value > 0.0:
                raise ValueError(f'{name} must be positive, got {value}')

        if self.wallMargin < 0.0:
            raise ValueError(f'wallMargin must be non-negative, got {self.wallMargin}')
        if 2.0 * self.wallMargin >= min(self.domainWidth, self.domainHeight):
            raise ValueError(
                f'wallMargin {self.wallMargin} leaves no room inside a '
                f'{self.domainWidth} x {self.domainHeight} domain'
            )
        if not 0.0 < self.dragFactor <= 1.0:
            raise ValueError(f'dragFactor must be in (0, 1], got {self.dragFactor}')
        if self.substeps < 1:
            raise ValueError(f'substeps must be >= 1, got {self.substeps}')
        if self.densityEpsilon < 0.0:
            raise ValueError(f'densityEpsilon must be non-negative, got {self.densityEpsilon}')
        if self.forceScheme not in FORCE_SCHEMES:
            raise ValueError(f'Unknown force scheme: {self.forceScheme}')

        # JSON gives lists; keep the frozen config hashable
        object.__setattr__(self, 'latticeOrigin', tuple(float(v) for v in self.latticeOrigin))

    @property
    def cellSize(self) -> float:
        '''Spatial grid cell size, equal to the smoothing radius [px].'''
        return self.smoothingRadius

    @property
    def wallBounds(self) -> tuple[float, float, float, float]:
        '''Reflecting wall positions (xMin, xMax, yMin, yMax) [px].'''
        return (
            self.wallMargin,
            self.domainWidth - self.wallMargin,
            self.wallMargin,
            self.domainHeight - self.wallMargin,
        )

    ######################################################################
    # -- Presets -- #
    ######################################################################

    @classmethod
    def prototype(cls) -> SimulationConfig:
        '''
        Interactive prototype: 1000 particles in an 800 x 400 px window.
        '''
        return cls(
            particleCount=const.particleCount,
            restDensity=const.restDensity,
            gasConstant=const.gasConstant,
            viscosity=const.viscosity,
            smoothingRadius=const.smoothingRadius,
            particleMass=const.particleMass,
            timeStep=const.timeStep,
            gravity=const.gravity,
            domainWidth=const.domainWidth,
            domainHeight=const.domainHeight,
        )

    @classmethod
    def small(cls) -> SimulationConfig:
        '''
        Small block for quick runs and tests.

        100 particles, same physics as the prototype.
        '''
        return cls(
            particleCount=100,
            restDensity=const.restDensity,
            gasConstant=const.gasConstant,
            viscosity=const.viscosity,
            smoothingRadius=const.smoothingRadius,
            particleMass=const.particleMass,
            timeStep=const.timeStep,
            gravity=const.gravity,
            domainWidth=const.domainWidth,
            domainHeight=const.domainHeight,
        )

    ######################################################################
    # -- Loading -- #
    ######################################################################

    @classmethod
    def fromDict(cls, data: dict) -> SimulationConfig:
        '''
        Build a configuration from a parsed JSON document.

        Reads the 'simulation', 'sph', 'fluid', and 'domain' sections.
        Missing keys fall back to the prototype defaults.

        Parameters:
        -----------
        data : dict
            Parsed configuration document

        Returns:
        --------
        SimulationConfig : Loaded configuration
        '''
        simSection = data.get('simulation', {})
        sphSection = data.get('sph', {})
        fluidSection = data.get('fluid', {})
        domainSection = data.get('domain', {})

        return cls(
            particleCount=simSection.get('particleCount', const.particleCount),
            restDensity=fluidSection.get('restDensity', const.restDensity),
            gasConstant=fluidSection.get('gasConstant', const.gasConstant),
            viscosity=fluidSection.get('viscosity', const.viscosity),
            smoothingRadius=sphSection.get('smoothingRadius', const.smoothingRadius),
            particleMass=fluidSection.get('particleMass', const.particleMass),
            timeStep=sphSection.get('timeStep', const.timeStep),
            gravity=fluidSection.get('gravity', const.gravity),
            domainWidth=domainSection.get('width', const.domainWidth),
            domainHeight=domainSection.get('height', const.domainHeight),
            wallMargin=domainSection.get('wallMargin', const.wallMargin),
            maxSpeed=sphSection.get('maxSpeed', const.maxSpeed),
            dragFactor=sphSection.get('dragFactor', const.dragFactor),
            latticeOrigin=tuple(simSection.get('latticeOrigin', const.latticeOrigin)),
            latticeSpacing=simSection.get('latticeSpacing', const.latticeSpacing),
            substeps=simSection.get('substeps', const.substeps),
            densityEpsilon=sphSection.get('densityEpsilon', const.densityEpsilon),
            forceScheme=sphSection.get('forceScheme', const.forceScheme),
        )

    @classmethod
    def fromJson(cls, configPath: str) -> SimulationConfig:
        '''
        Load configuration from a JSON file.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file

        Returns:
        --------
        SimulationConfig : Loaded configuration
        '''
        with open(configPath, 'r') as f:
            data = json.load(f)

        return cls.fromDict(data)

    def toDict(self) -> dict:
        '''Configuration as a JSON-ready document (inverse of fromDict).'''
        return {
            'simulation': {
                'particleCount': self.particleCount,
                'latticeOrigin': list(self.latticeOrigin),
                'latticeSpacing': self.latticeSpacing,
                'substeps': self.substeps,
            },
            'sph': {
                'smoothingRadius': self.smoothingRadius,
                'timeStep': self.timeStep,
                'maxSpeed': self.maxSpeed,
                'dragFactor': self.dragFactor,
                'densityEpsilon': self.densityEpsilon,
                'forceScheme': self.forceScheme,
            },
            'fluid': {
                'restDensity': self.restDensity,
                'gasConstant': self.gasConstant,
                'viscosity': self.viscosity,
                'particleMass': self.particleMass,
                'gravity': self.gravity,
            },
            'domain': {
                'width': self.domainWidth,
                'height': self.domainHeight,
                'wallMargin': self.wallMargin,
            },
        }


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Snapshot of scalar diagnostics after a step.

    Parameters:
    -----------
    time : float
        Simulated time [s]
    step : int
        Number of completed steps
    kineticEnergy : float
        Total kinetic energy sum(0.5 * m * |v|^2)
    maxVelocity : float
        Largest particle speed [px/s]
    meanDensity : float
        Mean particle density
    maxDensity : float
        Largest particle density
    guardedPairs : int
        Neighbor contributions skipped by the density guard in the last step
    '''

    time: float
    step: int
    kineticEnergy: float
    maxVelocity: float
    meanDensity: float
    maxDensity: float
    guardedPairs: int = 0


######################################################################
# -- Solver Protocol -- #
######################################################################

class SphSolverProtocol(Protocol):
    '''Interface the rendering/driving collaborator relies on.'''

    def step(self) -> None:
        '''Advance exactly one time step.'''
        ...

    def totalKineticEnergy(self) -> float:
        '''Total kinetic energy of all particles.'''
        ...

    def iterParticles(self) -> Iterator[ParticleSnapshot]:
        '''Read-only iteration over the current particles.'''
        ...

    @property
    def particles(self) -> ParticleSystem:
        '''Access the particle system.'''
        ...
