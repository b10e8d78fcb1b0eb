"""Encode scalars and coordinates into SDRs and decode scalar SDRs back."""

__version__ = "0.1.0"
