"""Contains exceptions raised when reconciling application configuration."""


class ConfigurationError(Exception):
    """Raised when the automation configuration is missing or invalid."""

    pass


class RequiredConfigurationElementError(ConfigurationError):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, env_name: str, cli_name: str | None = None) -> None:
        """Initializes the exception with the name of the missing element and where it can be set."""
        sources = f"environment variable {env_name}"
        if cli_name is not None:
            sources = f"command line option {cli_name} or {sources}"
        super().__init__(f"Missing required configuration element: {name} ({sources})")
        self.name = name
        self.env_name = env_name
        self.cli_name = cli_name
