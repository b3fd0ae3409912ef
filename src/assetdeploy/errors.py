"""Exceptions raised by assetdeploy."""


class AssetDeployError(Exception):
    """Base exception for assetdeploy errors."""

    pass


class ResourceNotFoundError(AssetDeployError, FileNotFoundError):
    """Raised when a bundled resource cannot be located."""

    def __init__(self, resource_name: str, package: str | None = None):
        self.resource_name = resource_name
        self.package = package
        if package:
            message = f'Resource "{resource_name}" not found in package {package}'
        else:
            message = f'Resource "{resource_name}" not found'
        super().__init__(message)


class UnsupportedArchiveError(AssetDeployError, ValueError):
    """Raised when a file is not an archive format we can read."""

    pass


class InvalidLocatorError(AssetDeployError, ValueError):
    """Raised when a resource locator string cannot be parsed."""

    pass
