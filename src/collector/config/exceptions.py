"""Configuration errors."""


class ConfigError(Exception):
    """Raised when Collector settings cannot be read, parsed or validated."""
