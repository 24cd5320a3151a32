# -- Runner and Plot Tests -- #

'''
Command-line runner and Plotly figures on tiny runs.

Sean Bowman [02/19/2026]
'''

import dataclasses
import os

import plotly.graph_objects as go
import pytest

from FluidSim.runner import FluidSimRunner, buildParser, main, resolveConfig
from FluidSim.sph.protocols import SimulationConfig
from FluidSim.sph.sphSolver import SphSolver
from FluidSim.visualization.energyPlots import plotEnergyHistory, plotDensityField


def testRunnerRunsAndExports(smallConfig, tmp_path, capsys):
    config = dataclasses.replace(smallConfig, substeps=1)
    runner = FluidSimRunner()

    result = runner.run(config, nFrames=3, exportDir=str(tmp_path), exportInterval=2)

    assert result['finalState'].step == 3
    # Initial frame, frame 2, and the final frame
    assert result['nFrames'] == 3
    assert os.path.exists(result['exportPath'])
    out = capsys.readouterr().out
    assert 'SIMULATION SUMMARY' in out
    assert 'Occupied Cells' in out


def testRunnerRejectsZeroFrames(smallConfig):
    with pytest.raises(ValueError):
        FluidSimRunner().run(smallConfig, nFrames=0, doExport=False)


def testResolveConfigAppliesOverrides():
    args = buildParser().parse_args(
        ['--preset', 'small', '--substeps', '2', '--force-scheme', 'snapshot'],
    )
    config = resolveConfig(args)

    assert config.particleCount == SimulationConfig.small().particleCount
    assert config.substeps == 2
    assert config.forceScheme == 'snapshot'


def testMainWithoutExport(capsys):
    main(['--preset', 'small', '--frames', '1', '--substeps', '1', '--no-export'])
    assert 'FLUIDSIM' in capsys.readouterr().out


def testEnergyPlot(smallConfig):
    solver = SphSolver(dataclasses.replace(smallConfig, substeps=1))
    solver.advanceFrame()
    solver.advanceFrame()

    fig = plotEnergyHistory(solver.energyHistory)

    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 1
    assert len(fig.data[0].y) == 2


def testDensityFieldPlot(smallConfig):
    solver = SphSolver(smallConfig)
    solver.step()

    fig = plotDensityField(solver)

    assert isinstance(fig, go.Figure)
    assert len(fig.data[0].x) == smallConfig.particleCount
