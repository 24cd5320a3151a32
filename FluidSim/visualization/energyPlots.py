# -- Energy and Particle Field Plots -- #

'''
Plotly figures for inspecting a FluidSim run.

plotEnergyHistory draws the kinetic energy per frame, normalized to
its peak. plotDensityField draws the particles in screen coordinates
(y down), colored by density relative to the rest density and
clipped at 1.

Sean Bowman [02/16/2026]
'''

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go

from FluidSim.visualization import theme
from FluidSim.sph.energyHistory import EnergyHistory
from FluidSim.sph.sphSolver import SphSolver


def plotEnergyHistory(history: EnergyHistory, normalize: bool = True) -> go.Figure:
    '''
    Plot kinetic energy per frame.

    Parameters:
    -----------
    history : EnergyHistory
        Recorded energy samples
    normalize : bool
        Divide by the peak sample

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    values = history.normalized() if normalize else history.values
    frames = np.arange(len(values))

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=frames, y=values, mode='lines', name='Kinetic energy',
        line=dict(color=theme.GREEN, width=2),
    ))

    fig.update_layout(
        title=f'Kinetic Energy (peak {history.maxValue:.4g})',
        xaxis_title='Frame',
        yaxis_title='KE / peak' if normalize else 'Kinetic energy',
        template=theme.TEMPLATE,
        height=300,
    )

    return fig


def plotDensityField(solver: SphSolver) -> go.Figure:
    '''
    Scatter plot of the current particles colored by density.

    Parameters:
    -----------
    solver : SphSolver
        Solver whose current state is drawn

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    config = solver.config
    positions = solver.positions
    densityRatio = np.clip(solver.densities / config.restDensity, 0.0, 1.0)

    fig = go.Figure()
    fig.add_trace(go.Scattergl(
        x=positions[:, 0], y=positions[:, 1], mode='markers', name='Particles',
        marker=dict(
            size=5,
            color=densityRatio,
            colorscale=theme.DENSITY_COLORSCALE,
            cmin=0.0, cmax=1.0,
            colorbar=dict(title='rho / rho0'),
        ),
    ))

    xMin, xMax, yMin, yMax = config.wallBounds
    fig.add_shape(
        type='rect', x0=xMin, x1=xMax, y0=yMin, y1=yMax,
        line=dict(color=theme.WALL, dash='dash', width=1),
    )

    fig.update_layout(
        title=f'Particles at t = {solver.time:.4f} s (step {solver.stepCount})',
        xaxis=dict(title='x (px)', range=[0.0, config.domainWidth]),
        yaxis=dict(
            title='y (px)', range=[config.domainHeight, 0.0],
            scaleanchor='x', scaleratio=1,
        ),
        template=theme.TEMPLATE,
        height=500,
    )

    return fig
