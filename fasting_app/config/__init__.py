"""
Configuration module.

Frozen dataclass defaults, YAML overrides and parameter validation.
"""
