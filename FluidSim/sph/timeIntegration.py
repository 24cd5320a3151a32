# -- SPH Time Integration Schemes -- #

'''
Time integration and velocity stabilization for the particle system.

Implements the Symplectic Euler (semi-implicit Euler) update:

    v(t+dt) = v(t) + a(t) * dt      (kick)
    x(t+dt) = x(t) + v(t+dt) * dt   (drift)

The drift uses the updated velocity. In the sequential force scheme
the kick happens particle by particle inside the force pass, so only
the drift is applied here.

Two stabilizers follow the drift and the wall reflection each step:
a speed cap that rescales fast particles onto the cap, then a
uniform drag factor applied to every particle.

References:
-----------
Hairer et al. (2003) -- Geometric Numerical Integration

Sean Bowman [02/13/2026]
'''

from __future__ import annotations

import numpy as np

from FluidSim.sph.particles import ParticleSystem


######################################################################
# -- Symplectic Euler Integrator -- #
######################################################################

class SymplecticEuler:
    '''
    Symplectic (semi-implicit) Euler integrator.

    kick() and drift() are separate so the force pass can apply the
    kick particle by particle.
    '''

    def kick(self, particles: ParticleSystem, accelerations: np.ndarray, dt: float) -> None:
        '''
        Update velocities from accelerations.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system to advance
        accelerations : np.ndarray
            Accelerations [px/s^2], shape (N, 2)
        dt : float
            Time step size [s]
        '''
        particles.velocities += accelerations * dt

    def drift(self, particles: ParticleSystem, dt: float) -> None:
        '''
        Update positions from the (new) velocities.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system to advance
        dt : float
            Time step size [s]
        '''
        particles.positions += particles.velocities * dt


######################################################################
# -- Stabilizers -- #
######################################################################

def clampSpeed(velocities: np.ndarray, maxSpeed: float) -> int:
    '''
    Rescale velocities faster than maxSpeed onto the cap, in place.

    v -> (v / |v|) * maxSpeed    where |v| > maxSpeed

    The rescaled norm can round to one ulp above the cap; such rows are
    pulled onto the next float below maxSpeed so that |v| <= maxSpeed
    holds exactly afterwards.

    Parameters:
    -----------
    velocities : np.ndarray
        Velocities [px/s], shape (N, 2), modified in place
    maxSpeed : float
        Speed cap [px/s]

    Returns:
    --------
    int : Number of particles that were rescaled
    '''
    speeds = np.linalg.norm(velocities, axis=1)
    tooFast = speeds > maxSpeed
    nClamped = int(np.count_nonzero(tooFast))

    if nClamped:
        velocities[tooFast] = velocities[tooFast] / speeds[tooFast, np.newaxis] * maxSpeed

        target = maxSpeed
        over = np.linalg.norm(velocities, axis=1) > maxSpeed
        while np.any(over):
            target = np.nextafter(target, 0.0)
            overSpeeds = np.linalg.norm(velocities[over], axis=1)
            velocities[over] *= (target / overSpeeds)[:, np.newaxis]
            over = np.linalg.norm(velocities, axis=1) > maxSpeed

    return nClamped


def applyDrag(velocities: np.ndarray, dragFactor: float) -> None:
    '''Scale every velocity by dragFactor, in place.'''
    velocities *= dragFactor
