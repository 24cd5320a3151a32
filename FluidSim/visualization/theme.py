# -- Visualization Theme -- #

'''
Centralized dark-mode theme for all FluidSim Plotly visualizations.

Sean Bowman [02/16/2026]
'''

# Plotly template
TEMPLATE = 'plotly_dark'

# Energy trace
GREEN = '#00FF00'

# Walls
WALL = '#888888'

# Density colormap: blue (below rest) to magenta (at or above rest)
DENSITY_COLORSCALE = [
    [0.0, 'rgb(0, 100, 255)'],
    [1.0, 'rgb(255, 100, 128)'],
]
