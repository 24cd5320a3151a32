# -- Force and Integration Tests -- #

'''
Gravity, sequential velocity coupling, the snapshot scheme, the
density guard, wall reflection, speed cap, and drag.

Sean Bowman [02/18/2026]
'''

import dataclasses
import logging

import numpy as np
import pytest

from FluidSim.sph.boundaryHandling import WallBoundary
from FluidSim.sph.densityEstimator import DensityEstimator
from FluidSim.sph.forceIntegrator import ForceIntegrator
from FluidSim.sph.kernels import viscLaplacian
from FluidSim.sph.neighborSearch import SpatialHashGrid
from FluidSim.sph.timeIntegration import applyDrag, clampSpeed

from conftest import particlesAt, singleParticleConfig


def _prepare(config, positions, velocities=None):
    particles = particlesAt(positions, config, velocities=velocities)
    grid = SpatialHashGrid(config.cellSize)
    grid.insert(particles.positions)
    DensityEstimator(config).compute(particles, grid)
    return particles, grid


######################################################################
# -- Force Pass -- #
######################################################################

def testIsolatedParticleFeelsOnlyGravity():
    config = singleParticleConfig()
    particles, grid = _prepare(config, [[200.0, 50.0]])

    ForceIntegrator(config).applyForces(particles, grid)

    np.testing.assert_allclose(
        particles.velocities[0], [0.0, config.gravity * config.timeStep], rtol=1e-12,
    )


def testSequentialSchemeReadsUpdatedVelocities(smallConfig):
    # Viscosity only: no pressure, no gravity
    config = dataclasses.replace(smallConfig, particleCount=2, gasConstant=0.0, gravity=0.0)
    particles, grid = _prepare(
        config,
        [[100.0, 100.0], [108.0, 100.0]],
        velocities=[[0.0, 0.0], [10.0, 0.0]],
    )
    rho = particles.densities[0]
    k = config.viscosity * viscLaplacian(8.0, config.smoothingRadius) / rho
    dt = config.timeStep

    ForceIntegrator(config).applyForces(particles, grid)

    v0 = 10.0 * k * dt
    # Particle 1 sees particle 0's velocity from this pass
    v1 = 10.0 + (v0 - 10.0) * k * dt
    assert particles.velocities[0, 0] == pytest.approx(v0, rel=1e-12)
    assert particles.velocities[1, 0] == pytest.approx(v1, rel=1e-12)


def testSnapshotSchemeReadsFrozenVelocities(smallConfig):
    config = dataclasses.replace(
        smallConfig, particleCount=2, gasConstant=0.0, gravity=0.0, forceScheme='snapshot',
    )
    particles, grid = _prepare(
        config,
        [[100.0, 100.0], [108.0, 100.0]],
        velocities=[[0.0, 0.0], [10.0, 0.0]],
    )
    rho = particles.densities[0]
    k = config.viscosity * viscLaplacian(8.0, config.smoothingRadius) / rho
    dt = config.timeStep

    ForceIntegrator(config).applyForcesSnapshot(particles, grid.queryPairs(config.smoothingRadius))

    assert particles.velocities[0, 0] == pytest.approx(10.0 * k * dt, rel=1e-12)
    assert particles.velocities[1, 0] == pytest.approx(10.0 - 10.0 * k * dt, rel=1e-12)


def testSchemesAgreeWithoutViscousCoupling(smallConfig):
    config = dataclasses.replace(smallConfig, viscosity=0.0)
    rng = np.random.default_rng(3)
    positions = rng.uniform(150.0, 300.0, (config.particleCount, 2))

    sequential, grid = _prepare(config, positions)
    snapshot = sequential.copy()

    integrator = ForceIntegrator(config)
    integrator.applyForces(sequential, grid)
    integrator.applyForcesSnapshot(snapshot, grid.queryPairs(config.smoothingRadius))

    scale = np.max(np.abs(sequential.velocities))
    np.testing.assert_allclose(snapshot.velocities, sequential.velocities, rtol=1e-7, atol=1e-9 * scale)


def testPressurePushesOverdenseParticlesApart(smallConfig):
    # Rest density below the pair density gives positive pressure
    config = dataclasses.replace(smallConfig, particleCount=2, restDensity=0.0, gravity=0.0)
    particles, grid = _prepare(config, [[100.0, 100.0], [108.0, 100.0]])
    assert np.all(particles.pressures > 0.0)

    ForceIntegrator(config).applyForces(particles, grid)

    assert particles.velocities[0, 0] < 0.0
    assert particles.velocities[1, 0] > 0.0


def testDensityGuardSkipsEmptyNeighbor(smallConfig, caplog):
    config = dataclasses.replace(smallConfig, particleCount=2)
    particles, grid = _prepare(config, [[100.0, 100.0], [108.0, 100.0]])
    particles.densities[1] = 0.0

    integrator = ForceIntegrator(config)
    with caplog.at_level(logging.WARNING, logger='FluidSim.sph.forceIntegrator'):
        integrator.applyForces(particles, grid)

    assert np.all(np.isfinite(particles.velocities))
    assert integrator.guardedPairs == 1
    assert 'Skipped 1 neighbor contribution' in caplog.text

    # Particle 0 saw nothing but gravity
    np.testing.assert_allclose(
        particles.velocities[0], [0.0, config.gravity * config.timeStep], rtol=1e-12,
    )


def testDensityGuardInSnapshotScheme(smallConfig):
    config = dataclasses.replace(smallConfig, particleCount=2, forceScheme='snapshot')
    particles, grid = _prepare(config, [[100.0, 100.0], [108.0, 100.0]])
    particles.densities[1] = 0.0

    integrator = ForceIntegrator(config)
    integrator.applyForcesSnapshot(particles, grid.queryPairs(config.smoothingRadius))

    assert np.all(np.isfinite(particles.velocities))
    assert integrator.guardedPairs == 1


def testGuardCounterResetsEachPass(smallConfig):
    config = dataclasses.replace(smallConfig, particleCount=2)
    particles, grid = _prepare(config, [[100.0, 100.0], [108.0, 100.0]])
    integrator = ForceIntegrator(config)

    particles.densities[1] = 0.0
    integrator.applyForces(particles, grid)
    assert integrator.guardedPairs == 1

    DensityEstimator(config).compute(particles, grid)
    integrator.applyForces(particles, grid)
    assert integrator.guardedPairs == 0


######################################################################
# -- Walls and Stabilizers -- #
######################################################################

def testWallReflectionRightWall():
    walls = WallBoundary(5.0, 795.0, 5.0, 395.0)
    config = singleParticleConfig()
    particles = particlesAt([[800.0, 200.0]], config, velocities=[[120.0, 7.0]])

    walls.enforceBoundary(particles)

    assert particles.positions[0, 0] == 795.0
    assert particles.velocities[0, 0] == pytest.approx(-60.0)
    assert particles.velocities[0, 1] == 7.0


def testWallReflectionCornerReflectsBothAxes():
    walls = WallBoundary(5.0, 795.0, 5.0, 395.0)
    config = singleParticleConfig()
    particles = particlesAt([[1.0, 399.0]], config, velocities=[[-40.0, 80.0]])

    walls.enforceBoundary(particles)

    np.testing.assert_allclose(particles.positions[0], [5.0, 395.0])
    np.testing.assert_allclose(particles.velocities[0], [20.0, -40.0])


def testIntegrateClampsToRightWall():
    config = singleParticleConfig()
    xWall = config.domainWidth - config.wallMargin
    particles = particlesAt([[xWall - 0.1, 200.0]], config, velocities=[[200.0, 0.0]])

    ForceIntegrator(config).integrate(particles)

    assert particles.positions[0, 0] == xWall
    # Reflected (-0.5) then drag
    assert particles.velocities[0, 0] == pytest.approx(-0.5 * 200.0 * config.dragFactor)


def testClampSpeedRescalesOntoCap():
    velocities = np.array([[3000.0, 4000.0], [30.0, 40.0]])

    nClamped = clampSpeed(velocities, 1000.0)

    assert nClamped == 1
    np.testing.assert_allclose(velocities, [[600.0, 800.0], [30.0, 40.0]])


def testDragScalesEveryVelocity():
    velocities = np.array([[100.0, -50.0], [0.0, 0.0]])
    applyDrag(velocities, 0.995)
    np.testing.assert_allclose(velocities, [[99.5, -49.75], [0.0, 0.0]])


def testIntegrateOrderCapThenDrag():
    config = singleParticleConfig()
    particles = particlesAt([[400.0, 200.0]], config, velocities=[[0.0, 5000.0]])

    ForceIntegrator(config).integrate(particles)

    assert particles.velocities[0, 1] == pytest.approx(config.maxSpeed * config.dragFactor)


def testWallBoundaryRejectsEmptyBox():
    with pytest.raises(ValueError):
        WallBoundary(10.0, 5.0, 0.0, 100.0)


def testClampSpeedNeverLeavesRowsAboveCap():
    rng = np.random.default_rng(3)
    velocities = rng.normal(0.0, 5000.0, size=(2000, 2))
    fast = np.linalg.norm(velocities, axis=1) > 1000.0

    nClamped = clampSpeed(velocities, 1000.0)

    speeds = np.linalg.norm(velocities, axis=1)
    assert nClamped == np.count_nonzero(fast)
    assert np.all(speeds <= 1000.0)
    np.testing.assert_allclose(speeds[fast], 1000.0, rtol=1e-12)
