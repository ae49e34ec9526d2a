"""lift-signals: training analytics for strength workout history."""

__version__ = "0.1.0"
