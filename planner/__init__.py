"""Retirement finance planner: forms, projection engine and report metrics."""

__version__ = "1.0.0"
