"""
Centralized exception hierarchy for the sops buildpack.

Every error carries the process exit code the CLI reports for it.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class BuildpackError(Exception):
    """Base exception for all buildpack errors."""

    exit_code = 1


# ============================================================================
# Invocation Exceptions
# ============================================================================


class ArgumentContractError(BuildpackError):
    """Raised when the build orchestrator passes more arguments than expected."""

    def __init__(self, argument_count: int):
        self.argument_count = argument_count
        self.exit_code = 2 + argument_count
        super().__init__(
            f"Expected at most 3 arguments, received {argument_count}; "
            "the buildpack calling contract may have changed"
        )


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(BuildpackError):
    """Base exception for configuration errors."""

    pass


class MissingConfigVarError(ConfigError):
    """Raised when a required config var is not provided."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Required config var {name} is not set")


# ============================================================================
# Install Exceptions
# ============================================================================


class InstallError(BuildpackError):
    """Base exception for install and cache errors."""

    pass


class DownloadError(InstallError):
    """Raised when the artifact transfer fails."""

    pass


class ArtifactValidationError(InstallError):
    """Raised when a downloaded artifact is empty or fails its checksum."""

    pass
