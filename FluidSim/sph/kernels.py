# -- SPH Smoothing Kernels -- #

'''
Smoothing kernel functions for 2D SPH interpolation.

Implements the three kernels of Muller et al. (2003), each with
compact support at r = h:

    poly6          density smoothing
    spiky gradient pressure force
    viscosity      Laplacian of the viscosity kernel

All functions are pure. The scalar versions are used for single
evaluations; the batch versions take NumPy arrays of distances and
apply the same support rules element-wise.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications
Desbrun & Gascuel (1996) -- Smoothed Particles: A new paradigm for
    animating highly deformable bodies

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import math

import numpy as np


######################################################################
# -- Normalization Constants -- #
######################################################################

def poly6Coefficient(h: float) -> float:
    '''Normalization 315 / (64 * pi * h^9) of the poly6 kernel.'''
    return 315.0 / (64.0 * math.pi * h ** 9)


def spikyGradCoefficient(h: float) -> float:
    '''Gradient coefficient -45 / (pi * h^6) of the spiky kernel.'''
    return -45.0 / (math.pi * h ** 6)


def viscLaplacianCoefficient(h: float) -> float:
    '''Laplacian coefficient 45 / (pi * h^6) of the viscosity kernel.'''
    return 45.0 / (math.pi * h ** 6)


######################################################################
# -- Scalar Kernels -- #
######################################################################

def poly6(r: float, h: float) -> float:
    '''
    Evaluate the poly6 density kernel W(r, h).

    W = 315 / (64 * pi * h^9) * (h^2 - r^2)^3    for 0 <= r <= h

    Parameters:
    -----------
    r : float
        Distance between particles [px]
    h : float
        Smoothing radius [px]

    Returns:
    --------
    float : Kernel value, 0 outside [0, h]
    '''
    if 0.0 <= r <= h:
        return poly6Coefficient(h) * (h * h - r * r) ** 3
    return 0.0


def spikyGrad(displacement: np.ndarray, r: float, h: float) -> np.ndarray:
    '''
    Evaluate the spiky kernel gradient.

    grad_W = -45 / (pi * h^6) * (h - r)^2 * (displacement / r)

    The magnitude is independent of direction. At r = 0 the
    direction is undefined and the zero vector is returned.

    Parameters:
    -----------
    displacement : np.ndarray
        Vector r_i - r_j [px], shape (2,)
    r : float
        Distance |displacement| [px]
    h : float
        Smoothing radius [px]

    Returns:
    --------
    np.ndarray : Gradient vector, zero for r = 0 or r > h
    '''
    if 0.0 < r <= h:
        magnitude = spikyGradCoefficient(h) * (h - r) ** 2
        return np.asarray(displacement, dtype=float) * (magnitude / r)
    return np.zeros(2)


def viscLaplacian(r: float, h: float) -> float:
    '''
    Evaluate the Laplacian of the viscosity kernel.

    lap_W = 45 / (pi * h^6) * (h - r)    for 0 <= r <= h

    Parameters:
    -----------
    r : float
        Distance between particles [px]
    h : float
        Smoothing radius [px]

    Returns:
    --------
    float : Laplacian value, 0 outside [0, h]
    '''
    if 0.0 <= r <= h:
        return viscLaplacianCoefficient(h) * (h - r)
    return 0.0


######################################################################
# -- Vectorized (Batch) Operations -- #
######################################################################

def poly6Batch(distances: np.ndarray, h: float) -> np.ndarray:
    '''
    Evaluate poly6 for an array of distances.

    Parameters:
    -----------
    distances : np.ndarray
        Distances [px], shape (N,)
    h : float
        Smoothing radius [px]

    Returns:
    --------
    np.ndarray : Kernel values, shape (N,)
    '''
    distances = np.asarray(distances, dtype=float)
    result = np.zeros_like(distances)

    inside = (distances >= 0.0) & (distances <= h)
    rInside = distances[inside]
    result[inside] = poly6Coefficient(h) * (h * h - rInside * rInside) ** 3

    return result


def spikyGradBatch(
    displacements: np.ndarray, distances: np.ndarray, h: float
) -> np.ndarray:
    '''
    Evaluate spiky gradients for an array of particle pairs.

    Parameters:
    -----------
    displacements : np.ndarray
        Vectors r_i - r_j [px], shape (N, 2)
    distances : np.ndarray
        Distances |r_i - r_j| [px], shape (N,)
    h : float
        Smoothing radius [px]

    Returns:
    --------
    np.ndarray : Gradient vectors, shape (N, 2)
    '''
    displacements = np.asarray(displacements, dtype=float)
    distances = np.asarray(distances, dtype=float)

    scale = np.zeros_like(distances)
    inside = (distances > 0.0) & (distances <= h)
    rInside = distances[inside]
    scale[inside] = spikyGradCoefficient(h) * (h - rInside) ** 2 / rInside

    return scale[:, np.newaxis] * displacements


def viscLaplacianBatch(distances: np.ndarray, h: float) -> np.ndarray:
    '''
    Evaluate the viscosity Laplacian for an array of distances.

    Parameters:
    -----------
    distances : np.ndarray
        Distances [px], shape (N,)
    h : float
        Smoothing radius [px]

    Returns:
    --------
    np.ndarray : Laplacian values, shape (N,)
    '''
    distances = np.asarray(distances, dtype=float)
    result = np.zeros_like(distances)

    inside = (distances >= 0.0) & (distances <= h)
    result[inside] = viscLaplacianCoefficient(h) * (h - distances[inside])

    return result
