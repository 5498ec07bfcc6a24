class ConfigurationError(ValueError):
    """Generic error thrown if there was an error while loading the harness configuration."""


class ConfigFileError(ConfigurationError):
    """The configuration file could not be read or parsed."""
