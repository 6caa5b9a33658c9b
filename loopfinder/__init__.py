"""Loop route generation for running and cycling."""

__version__ = "1.0.0"
