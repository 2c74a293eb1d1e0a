"""
Data preparation — parsing proposed environments, building engine inputs, validation.
"""

from .loader import load_environment_json, parse_environment
from .payload import EnvironmentPayload
from .validators import ValidationResult, validate_model

__all__ = [
    "load_environment_json",
    "parse_environment",
    "EnvironmentPayload",
    "ValidationResult",
    "validate_model",
]
