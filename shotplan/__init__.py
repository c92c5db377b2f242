"""Golf shot planning and scoring engine."""

__version__ = "0.4.0"
