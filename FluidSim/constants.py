# -- Default Parameters for the 2D SPH Fluid Prototype -- #

'''
Physical and numerical defaults for the 2D SPH fluid prototype.

Units are screen units: lengths in pixels, time in seconds, with the
y axis pointing down (gravity is a positive y acceleration).

References:
-----------
Muller et al. (2003) -- Particle-Based Fluid Simulation for
    Interactive Applications

Sean Bowman [02/12/2026]
'''

#--------------------------------------------------------------------#
# -- Fluid Properties -- #
#--------------------------------------------------------------------#

# Number of fluid particles
particleCount: int = 1000

# Rest density rho_0 [mass/px^2]
restDensity: float = 1000.0

# Gas constant k in p = k * (rho - rho_0)
gasConstant: float = 50.0

# Viscosity coefficient mu
viscosity: float = 250.0

# Mass of a single particle
particleMass: float = 200.0

# Gravitational acceleration magnitude [px/s^2], +y is down
gravity: float = 3000.0

#--------------------------------------------------------------------#
# -- SPH Numerical Parameters -- #
#--------------------------------------------------------------------#

# Smoothing radius h [px], also the spatial grid cell size
smoothingRadius: float = 16.0

# Fixed time step [s]
timeStep: float = 0.0015

# Sub-steps run per external frame
substeps: int = 5

# Neighbor densities at or below this value are skipped in the force sums
densityEpsilon: float = 1e-9

# Force accumulation scheme: 'sequential' (in-place, index order)
# or 'snapshot' (two-buffer, vectorized)
forceScheme: str = 'sequential'

#--------------------------------------------------------------------#
# -- Domain and Stability -- #
#--------------------------------------------------------------------#

# Domain extent [px]
domainWidth: float = 800.0
domainHeight: float = 400.0

# Distance of the reflecting walls from the domain edge [px]
wallMargin: float = 5.0

# Factor applied to the wall-normal velocity on reflection
wallRestitution: float = -0.5

# Speed cap [px/s]
maxSpeed: float = 1000.0

# Per-step velocity drag factor
dragFactor: float = 0.995

#--------------------------------------------------------------------#
# -- Initial Layout -- #
#--------------------------------------------------------------------#

# Corner of the initial square lattice nearest the origin [px]
latticeOrigin: tuple[float, float] = (200.0, 50.0)

# Lattice spacing [px]
latticeSpacing: float = 10.0

#--------------------------------------------------------------------#
# -- Diagnostics -- #
#--------------------------------------------------------------------#

# Number of kinetic energy samples kept for the energy history
energyHistoryLength: int = 800
