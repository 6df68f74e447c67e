"""Custom exceptions for gradle-inspector."""


class InspectorError(Exception):
    """Base exception for all inspector errors."""


class ToolingFailure(InspectorError):
    """Raised when Gradle cannot be run or does not produce a dependency model.

    This is the only error that aborts the resolution of a project directory.
    """

    def __init__(self, message: str, output: str = ""):
        self.output = output
        super().__init__(message)


class DescriptorNotFound(InspectorError):
    """Raised when no POM for an identifier exists in the local caches."""

    def __init__(self, coordinates: str):
        self.coordinates = coordinates
        super().__init__(
            f"Unable to find the POM for '{coordinates}' in the local Maven repository or "
            "Gradle cache."
        )


class DescriptorParseError(InspectorError):
    """Raised when an effective POM model cannot be built."""


class ChecksumUnavailable(InspectorError):
    """Raised when a remote checksum cannot be fetched or parsed."""
