"""Custom exceptions for kira-dependencies."""


class KiraError(Exception):
    """Base exception for all kira-dependencies errors."""


class ConfigurationError(KiraError):
    """Raised when the environment cannot be turned into a valid run configuration."""


class PackageManagerNotFoundError(ConfigurationError):
    """Raised when no backend is registered for the requested package manager."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        registered = ", ".join(available) if available else "none"
        super().__init__(
            f"No backend registered for package manager '{name}' (registered: {registered})"
        )


class PullRequestCreatorNotFoundError(ConfigurationError):
    """Raised when no pull-request creator is registered for a source provider."""

    def __init__(self, provider: str, available: list[str]):
        self.provider = provider
        self.available = available
        registered = ", ".join(available) if available else "none"
        super().__init__(
            f"No pull request creator registered for provider '{provider}' "
            f"(registered: {registered})"
        )
