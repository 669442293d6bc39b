"""Personal income tax estimator built on a progressive bracket engine."""

__version__ = "0.1.0"
