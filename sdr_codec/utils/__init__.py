"""Utility helpers shared across the encoders."""

from .schemas import EncoderSchemaValidator

__all__ = ["EncoderSchemaValidator"]
