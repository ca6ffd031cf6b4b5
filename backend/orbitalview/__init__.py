"""Orbital View — keyed proxy gateway and map session view-model."""

__version__ = "1.0.0"
