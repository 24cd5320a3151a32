# -- FluidSim Visualization Package -- #

'''
Plotly figures for energy history and particle fields.

Sean Bowman [02/16/2026]
'''
