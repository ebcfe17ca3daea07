"""
AR Graph Plotter v1.0.0

Scatter-plot scene builder for tabular JSON datasets.  Validates a
dataset against a small set of accepted record shapes, projects two or
three numeric fields into a unit cube, and builds a labelled, gridded
scene graph whose point primitives map back to their source records.

The desktop shell draws the scene with matplotlib inside a PySide6
window; the pipeline itself has no GUI dependency.
"""

APP_NAME = "AR Graph Plotter"
APP_VERSION = "1.0.0"
APP_DATE = "2026-10-17"
__version__ = APP_VERSION
