"""
Active Travel - walking and cycling trends from time-use diaries

A modular Python package that measures walking and cycling as a share of
total travel time per country and survey year, and estimates how fast
those shares change, using the Functional Core, Imperative Shell
architecture.

Structure:
- analysis/ : Functional Core (pure transformations)
- pipeline  : Functional Core entry point chaining the analysis stages
- config    : Analysis options (allow-list, trims, scales, exclusions)
- data/     : Imperative Shell (extract reading, table output)
- plotting/ : Plotly figures
- reports/  : HTML output
"""

__version__ = "0.1.0"
