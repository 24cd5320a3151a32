# -- FluidSim Export Package -- #

'''
Frame data export for external viewers.

Sean Bowman [02/16/2026]
'''

from FluidSim.export.frameExporter import FrameExporter
