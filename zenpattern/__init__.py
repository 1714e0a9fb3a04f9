"""Zen Pattern: deterministic generative pattern engine."""

from .engine import GenerationParameters, InvalidParameterError, build_parameters, generate_scene

__version__ = "0.1.0"
