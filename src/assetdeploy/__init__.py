"""Extract bundled resources from packages, archives and directories."""

__version__ = "0.1.0"

from .archives import ArchiveEntry, ArchiveHandler, ArchiveInfo
from .config import Config
from .errors import (
    AssetDeployError,
    InvalidLocatorError,
    ResourceNotFoundError,
    UnsupportedArchiveError,
)
from .filters import PathFilter
from .locators import ArchiveConnection, ResourceLocator
from .writer import (
    ExtractionResult,
    ResourceWriter,
    copy_resources,
    get_resource_writer,
    locate_resource,
    write_resource,
)

__all__ = [
    "__version__",
    "ArchiveConnection",
    "ArchiveEntry",
    "ArchiveHandler",
    "ArchiveInfo",
    "AssetDeployError",
    "Config",
    "ExtractionResult",
    "InvalidLocatorError",
    "PathFilter",
    "ResourceLocator",
    "ResourceNotFoundError",
    "ResourceWriter",
    "UnsupportedArchiveError",
    "copy_resources",
    "get_resource_writer",
    "locate_resource",
    "write_resource",
]
