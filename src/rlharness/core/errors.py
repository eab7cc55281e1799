"""Error taxonomy for the harness."""


class HarnessError(Exception):
    """Base class for all harness errors."""


class ConfigError(HarnessError):
    """Raised when a configuration source is unreadable or malformed."""


class RegistryError(HarnessError):
    """Base class for registry failures."""


class DuplicateRegistrationError(RegistryError):
    """Raised when a name is registered twice."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} '{name}' is already registered")


class UnknownNameError(RegistryError, KeyError):
    """Raised when creating from a name that was never registered."""

    def __init__(self, kind: str, name: str, available=()):
        self.kind = kind
        self.name = name
        self.available = sorted(available)
        super().__init__(
            f"{kind.capitalize()} '{name}' is not registered. "
            f"Available: {self.available}"
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


__all__ = [
    "HarnessError",
    "ConfigError",
    "RegistryError",
    "DuplicateRegistrationError",
    "UnknownNameError",
]
