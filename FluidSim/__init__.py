# -- FluidSim Package -- #

'''
Two-dimensional fluid simulation using Smoothed Particle Hydrodynamics.

A fixed block of particles falls and splashes inside a walled box,
driven by density, pressure, viscosity, and gravity.

Sean Bowman [02/12/2026]
'''

__version__ = '0.1.0'
