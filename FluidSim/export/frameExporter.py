# -- Simulation Frame Exporter -- #

'''
Exports SPH simulation frames as JSON for external viewers.

Collects particle snapshots during a run and writes them, with the
configuration and the kinetic energy history, to one compact JSON
file. The file is output only; the simulation never reads it back.

Sean Bowman [02/16/2026]
'''

from __future__ import annotations

import json
import os
from datetime import datetime

import numpy as np

from FluidSim.sph.protocols import SimulationConfig, SimulationState
from FluidSim.sph.particles import ParticleSystem


class FrameExporter:
    '''
    Accumulates particle frames over a run and writes them as JSON.

    Each frame holds the rounded positions, per-particle speeds and
    densities at one instant. A parallel energy record keeps the total
    kinetic energy at every recorded frame. Document layout:

    {
        "meta":   { "type": "fluidSim", "nFrames": ..., "nParticles": ... },
        "config": <SimulationConfig.toDict()>,
        "frames": [ { "time", "step", "positions", "speeds", "densities" } ],
        "energy": { "times": [...], "kinetic": [...] }
    }
    '''

    def __init__(self) -> None:
        self._frames: list[dict] = []
        self._energyHistory: dict[str, list[float]] = {
            'times': [],
            'kinetic': [],
        }

    @property
    def nFrames(self) -> int:
        '''Number of collected frames.'''
        return len(self._frames)

    def addFrame(self, state: SimulationState, particles: ParticleSystem) -> None:
        '''
        Record a simulation frame.

        Parameters:
        -----------
        state : SimulationState
            Current simulation state diagnostics
        particles : ParticleSystem
            Current particle system
        '''
        frame = {
            'time': round(state.time, 6),
            'step': state.step,
            'positions': np.round(particles.positions, 4).tolist(),
            'speeds': np.round(particles.speeds(), 4).tolist(),
            'densities': np.round(particles.densities, 6).tolist(),
        }
        self._frames.append(frame)

        self._energyHistory['times'].append(round(state.time, 6))
        self._energyHistory['kinetic'].append(round(state.kineticEnergy, 6))

    def toDict(self, config: SimulationConfig) -> dict:
        '''
        Assemble the export document without writing it.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration for metadata

        Returns:
        --------
        dict : JSON-ready document
        '''
        return {
            'meta': {
                'type': 'fluidSim',
                'dimensions': 2,
                'nFrames': len(self._frames),
                'nParticles': config.particleCount,
                'timeStep': config.timeStep,
                'created': datetime.now().isoformat(),
            },
            'config': config.toDict(),
            'frames': self._frames,
            'energy': self._energyHistory,
        }

    def export(
        self,
        config: SimulationConfig,
        outputDir: str = 'FluidSim/output',
        scenarioName: str = 'prototype',
    ) -> str:
        '''
        Write the collected frames to outputDir and return the file path.

        The filename is fluidSim_<scenarioName>_<YYYYmmdd_HHMMSS>.json.
        '''
        os.makedirs(outputDir, exist_ok=True)
        filepath = os.path.join(outputDir, _exportFilename(scenarioName))

        with open(filepath, 'w') as f:
            json.dump(self.toDict(config), f, indent=None, separators=(',', ':'))

        return filepath


def _exportFilename(scenarioName: str) -> str:
    stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f'fluidSim_{scenarioName}_{stamp}.json'
