"""
Foundry: assemble multi-file projects from graphs of composable blueprint components.

A blueprint is a graph of plugin-backed nodes; the engine schedules them,
routes their generated files by project shape, and merges overlapping output
into one coherent tree.
"""

__version__ = "0.4.0"
