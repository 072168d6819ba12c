R"""
This is the documentation of resxt, a small library to extract files that were embedded into an
application bundle as flat, dot-delimited resources and to write them back to a real directory
hierarchy on disk.

The package exports everything that is required for typical use:

1. `resxt.lib.bundle`: the bundle interface and implementations for mappings, zip containers,
   Python packages, and directories.
2. `resxt.loader`: looking up resources by name suffix and reading them into memory.
3. `resxt.writer`: writing single resources or whole resource folders to disk.
4. `resxt.lib.storage`: the storage provider and the collision policies for existing files.

The decoding of resource names is documented in `resxt.lib.names`, and the configuration
environment variables are documented in `resxt.lib.environment`.
"""
from __future__ import annotations

__version__ = '0.3.1'
__distribution__ = 'resxt'

from resxt.lib.bundle import (
    Bundle,
    DirectoryBundle,
    MemoryBundle,
    PackageBundle,
    ZipBundle,
)
from resxt.lib.storage import CollisionPolicy, LocalStorage
from resxt.loader import (
    AmbiguousResource,
    ResourceLoader,
    ResourceLookupError,
    ResourceNotFound,
)
from resxt.writer import ResourceWriter

__all__ = [
    'AmbiguousResource',
    'Bundle',
    'CollisionPolicy',
    'DirectoryBundle',
    'LocalStorage',
    'MemoryBundle',
    'PackageBundle',
    'ResourceLoader',
    'ResourceLookupError',
    'ResourceNotFound',
    'ResourceWriter',
    'ZipBundle',
]
