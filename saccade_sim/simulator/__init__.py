"""Simulation core (bounds, trajectory sampling, saccade planning, clock, engine).

The sub-modules are intentionally kept lightweight to ease unit testing and to
allow independent reuse by agents and dataset builders.
"""
