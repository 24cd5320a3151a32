# -- SPH Engine Package -- #

'''
Core Smoothed Particle Hydrodynamics (SPH) engine.

Provides kernel functions, the particle system, the spatial hash grid,
density estimation, force integration, boundary handling, and the
simulation driver.

Sean Bowman [02/12/2026]
'''

from FluidSim.sph.protocols import SimulationConfig, SimulationState
from FluidSim.sph.kernels import poly6, spikyGrad, viscLaplacian
from FluidSim.sph.particles import ParticleSnapshot, ParticleSystem
from FluidSim.sph.neighborSearch import SpatialHashGrid
from FluidSim.sph.sphSolver import SphSolver
