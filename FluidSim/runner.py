# -- Fluid Simulation Runner -- #

'''
Command-line entry point for running the 2D SPH fluid simulation.

Loads a preset or a JSON configuration, advances the simulation frame
by frame (several sub-steps per frame), prints progress, and
optionally exports frame data and opens Plotly figures.

Usage:
    fluidsim                                   # Prototype preset, 300 frames
    fluidsim --preset small --frames 50        # Quick run
    fluidsim --config FluidSim/configs/prototype.json
    fluidsim --force-scheme snapshot           # Two-buffer force pass
    fluidsim --no-export --plot                # Skip export, show figures

Sean Bowman [02/16/2026]
'''

from __future__ import annotations

import argparse
import dataclasses
import logging
import time as timeModule

from FluidSim.sph.protocols import FORCE_SCHEMES, SimulationConfig, SimulationState
from FluidSim.sph.sphSolver import SphSolver
from FluidSim.export.frameExporter import FrameExporter


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

PRESETS = {
    'prototype': SimulationConfig.prototype,
    'small': SimulationConfig.small,
}


def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='FluidSim -- 2D SPH fluid simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file',
    )
    parser.add_argument(
        '--preset', type=str, default='prototype',
        choices=sorted(PRESETS),
        help='Configuration preset (default: prototype)',
    )
    parser.add_argument(
        '--frames', type=int, default=300,
        help='Number of frames to run (default: 300)',
    )
    parser.add_argument(
        '--substeps', type=int, default=None,
        help='Sub-steps per frame (default: from config)',
    )
    parser.add_argument(
        '--force-scheme', type=str, default=None,
        choices=FORCE_SCHEMES,
        help='Force accumulation scheme (default: from config)',
    )
    parser.add_argument(
        '--export-interval', type=int, default=5,
        help='Frames between exported snapshots (default: 5)',
    )
    parser.add_argument(
        '--no-export', action='store_true',
        help='Skip frame data export',
    )
    parser.add_argument(
        '--output-dir', type=str, default='FluidSim/output',
        help='Output directory for exported frames (default: FluidSim/output)',
    )
    parser.add_argument(
        '--plot', action='store_true',
        help='Show energy and particle plots at the end',
    )
    parser.add_argument(
        '--verbose', action='store_true',
        help='Enable debug logging',
    )

    return parser


def resolveConfig(args: argparse.Namespace) -> SimulationConfig:
    '''
    Build the run configuration from parsed CLI arguments.

    A JSON file takes precedence over the preset; --substeps and
    --force-scheme override either.

    Parameters:
    -----------
    args : argparse.Namespace
        Parsed arguments

    Returns:
    --------
    SimulationConfig : Configuration for the run
    '''
    if args.config:
        config = SimulationConfig.fromJson(args.config)
    else:
        config = PRESETS[args.preset]()

    overrides = {}
    if args.substeps is not None:
        overrides['substeps'] = args.substeps
    if args.force_scheme is not None:
        overrides['forceScheme'] = args.force_scheme

    if overrides:
        config = dataclasses.replace(config, **overrides)

    return config


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class FluidSimRunner:
    '''
    Runs an SPH simulation and reports on it.

    Handles the full pipeline: solver setup, frame loop with progress
    reporting, and optional frame export.
    '''

    def __init__(self) -> None:
        self._exporter: FrameExporter = FrameExporter()
        self._solver: SphSolver | None = None

    @property
    def solver(self) -> SphSolver | None:
        '''Solver of the last run.'''
        return self._solver

    def run(
        self,
        config: SimulationConfig,
        nFrames: int = 300,
        doExport: bool = True,
        exportDir: str = 'FluidSim/output',
        exportInterval: int = 5,
        scenarioName: str = 'prototype',
    ) -> dict:
        '''
        Run a simulation for a number of frames.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration
        nFrames : int
            Number of frames to run
        doExport : bool
            Whether to export frame data
        exportDir : str
            Output directory for frame export
        exportInterval : int
            Frames between exported snapshots
        scenarioName : str
            Name used in the export filename

        Returns:
        --------
        dict : Simulation results summary
        '''
        if nFrames < 1:
            raise ValueError(f'nFrames must be >= 1, got {nFrames}')
        if exportInterval < 1:
            raise ValueError(f'exportInterval must be >= 1, got {exportInterval}')

        print()
        print('=' * 62)
        print('  FLUIDSIM -- 2D SPH SIMULATION')
        print('=' * 62)
        print()

        #--------------------------------------------------------------------#
        # Setup
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  SETUP')
        print('-' * 62)

        solver = SphSolver(config)
        self._solver = solver

        print(f'  Particles:         {config.particleCount:8d}')
        print(f'  Domain:            {config.domainWidth:5.0f} x {config.domainHeight:<5.0f} px')
        print(f'  Smoothing Radius:  {config.smoothingRadius:8.2f} px')
        print(f'  Particle Mass:     {config.particleMass:8.2f}')
        print(f'  Rest Density:      {config.restDensity:8.2f}')
        print(f'  Gas Constant:      {config.gasConstant:8.2f}')
        print(f'  Viscosity:         {config.viscosity:8.2f}')
        print(f'  Gravity:           {config.gravity:8.1f} px/s^2')
        print(f'  Time Step:         {config.timeStep:8.5f} s')
        print(f'  Sub-steps/Frame:   {config.substeps:8d}')
        print(f'  Force Scheme:      {config.forceScheme:>8s}')
        print(f'  Frames:            {nFrames:8d}')
        print()

        self._exporter.addFrame(solver.currentState, solver.particles)

        #--------------------------------------------------------------------#
        # Frame Loop
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  RUNNING SIMULATION')
        print('-' * 62)
        print()
        print(f'  {"Frame":>6}  {"Step":>7}  {"Time":>8}  {"KE":>12}  {"MaxVel":>8}  {"Guarded":>7}')
        print(f'  {"":>6}  {"":>7}  {"(s)":>8}  {"":>12}  {"(px/s)":>8}  {"":>7}')
        print('  ' + '-' * 58)

        wallClockStart = timeModule.time()
        printInterval = max(1, nFrames // 20)
        totalGuarded = 0
        state: SimulationState = solver.currentState

        for frame in range(1, nFrames + 1):
            state = solver.advanceFrame()
            totalGuarded += state.guardedPairs

            if frame % exportInterval == 0:
                self._exporter.addFrame(state, solver.particles)

            if frame % printInterval == 0 or frame == nFrames:
                print(
                    f'  {frame:6d}  {state.step:7d}  {state.time:8.4f}  '
                    f'{state.kineticEnergy:12.4e}  {state.maxVelocity:8.2f}  '
                    f'{state.guardedPairs:7d}'
                )

        wallClockSeconds = timeModule.time() - wallClockStart

        if nFrames % exportInterval != 0:
            self._exporter.addFrame(state, solver.particles)

        print()
        print(f'  Simulation complete.')
        print(f'  Total steps:       {state.step:8d}')
        print(f'  Wall-clock time:   {wallClockSeconds:8.1f} s')
        print(f'  Frames recorded:   {self._exporter.nFrames:8d}')
        print()

        #--------------------------------------------------------------------#
        # Export
        #--------------------------------------------------------------------#
        exportPath = None
        if doExport:
            print('-' * 62)
            print('  EXPORTING FRAME DATA')
            print('-' * 62)

            exportPath = self._exporter.export(
                config=config,
                outputDir=exportDir,
                scenarioName=scenarioName,
            )
            print(f'  Exported to: {exportPath}')
            print()

        #--------------------------------------------------------------------#
        # Summary
        #--------------------------------------------------------------------#
        print('=' * 62)
        print('  SIMULATION SUMMARY')
        print('=' * 62)
        print(f'  Final KE:          {state.kineticEnergy:12.4e}')
        print(f'  Peak KE:           {solver.energyHistory.maxValue:12.4e}')
        print(f'  Mean Density:      {state.meanDensity:12.4e}')
        print(f'  Max Density:       {state.maxDensity:12.4e}')
        print(f'  Max Velocity:      {state.maxVelocity:8.2f} px/s')
        print(f'  Guarded Pairs:     {totalGuarded:8d}')
        print(f'  Occupied Cells:    {solver.grid.nCells:8d}')
        print('=' * 62)
        print()

        return {
            'finalState': state,
            'wallClockSeconds': wallClockSeconds,
            'nFrames': self._exporter.nFrames,
            'exportPath': exportPath,
            'totalGuardedPairs': totalGuarded,
        }


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main(argv: list[str] | None = None) -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    config = resolveConfig(args)
    scenarioName = 'custom' if args.config else args.preset

    runner = FluidSimRunner()
    runner.run(
        config,
        nFrames=args.frames,
        doExport=not args.no_export,
        exportDir=args.output_dir,
        exportInterval=args.export_interval,
        scenarioName=scenarioName,
    )

    if args.plot:
        from FluidSim.visualization.energyPlots import plotEnergyHistory, plotDensityField

        plotEnergyHistory(runner.solver.energyHistory).show()
        plotDensityField(runner.solver).show()


if __name__ == '__main__':
    main()
