#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Bundles are the containers from which resources are extracted. A bundle has an identifier, it can
enumerate the names of all resources it contains, and it can open a stream for any of them. The
resource names are flat: Each name is the identifier of the bundle followed by the relative path of
the embedded file, where every path separator was replaced by a period. All core logic in resxt
works against the abstract `resxt.lib.bundle.Bundle` interface; this module also provides concrete
implementations for the most common ways to ship files:

- `resxt.lib.bundle.MemoryBundle` for resources that are already available as a mapping.
- `resxt.lib.bundle.ZipBundle` for files stored in a zip container.
- `resxt.lib.bundle.PackageBundle` for data files that ship inside a Python package.
- `resxt.lib.bundle.DirectoryBundle` for a directory tree on disk.
"""
from __future__ import annotations

import abc
import io
import zipfile

from importlib import import_module, resources
from pathlib import Path
from types import ModuleType

from resxt.lib.names import resource_name
from resxt.lib.types import BinaryIO, Iterable, Mapping, buf, pathlike

__all__ = [
    'Bundle',
    'DirectoryBundle',
    'MemoryBundle',
    'PackageBundle',
    'ZipBundle',
]


class Bundle(abc.ABC):
    """
    The abstract interface of a resource bundle. Resource names are unique within a bundle, and
    streams returned by `resxt.lib.bundle.Bundle.open` are single-use, readable to the end of the
    stream, and have to be closed by the caller.
    """
    identifier: str

    @abc.abstractmethod
    def names(self) -> list[str]:
        """
        Return the names of all resources in the bundle.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def open(self, name: str) -> BinaryIO:
        """
        Open a stream for the resource with the given exact name. Raises a `KeyError` if there is
        no such resource.
        """
        raise NotImplementedError

    def __repr__(self):
        return F'<{self.__class__.__name__}:{self.identifier}>'


class _FlatBundle(Bundle, abc.ABC):
    """
    A helper for bundles that have to flatten a hierarchical path structure into resource names.
    The member table maps each resource name to whatever the subclass needs to open it.
    """
    def __init__(self, identifier: str):
        self.identifier = identifier
        self._members = None

    @abc.abstractmethod
    def _walk(self) -> Iterable[tuple[str, object]]:
        """
        Yield pairs of relative, slash-separated paths and the corresponding member objects.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def _open(self, member) -> BinaryIO:
        raise NotImplementedError

    @property
    def members(self) -> dict[str, object]:
        if self._members is None:
            self._members = {
                resource_name(self.identifier, path): member for path, member in self._walk()}
        return self._members

    def names(self):
        return list(self.members)

    def open(self, name: str):
        try:
            member = self.members[name]
        except KeyError:
            raise KeyError(F'{self!r} does not contain a resource named {name}') from None
        return self._open(member)


class MemoryBundle(Bundle):
    """
    A bundle whose resources are given as a mapping from full resource names to binary data.
    """
    def __init__(self, identifier: str, resources: Mapping[str, buf]):
        self.identifier = identifier
        self.resources = dict(resources)

    def names(self):
        return list(self.resources)

    def open(self, name: str):
        try:
            data = self.resources[name]
        except KeyError:
            raise KeyError(F'{self!r} does not contain a resource named {name}') from None
        return io.BytesIO(bytes(data))


class ZipBundle(_FlatBundle):
    """
    A bundle backed by a zip container. The path of each member file is flattened into a dotted
    resource name that is prefixed with the bundle identifier. If no identifier is given, the stem
    of the archive file name is used. Directory entries are skipped.
    """
    def __init__(self, archive: pathlike | BinaryIO | buf, identifier: str | None = None):
        if identifier is None:
            try:
                identifier = Path(archive).stem
            except TypeError:
                raise ValueError('An identifier is required for a zip bundle that is not read from a file.')
        if isinstance(archive, (bytes, bytearray, memoryview)):
            archive = io.BytesIO(archive)
        super().__init__(identifier)
        self.archive = zipfile.ZipFile(archive)

    def _walk(self):
        for info in self.archive.infolist():
            if info.is_dir():
                continue
            yield info.filename, info

    def _open(self, member: zipfile.ZipInfo):
        return self.archive.open(member)

    def close(self):
        self.archive.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
        return False


class DirectoryBundle(_FlatBundle):
    """
    A bundle that contains every file below the given root directory. If no identifier is given,
    the name of the root directory is used.
    """
    def __init__(self, root: pathlike, identifier: str | None = None):
        root = Path(root)
        if not root.is_dir():
            raise NotADirectoryError(F'not a directory: {root}')
        super().__init__(identifier or root.name)
        self.root = root

    def _walk(self):
        for path in sorted(self.root.rglob('*')):
            if path.is_file():
                yield path.relative_to(self.root).as_posix(), path

    def _open(self, member: Path):
        return member.open('rb')


class PackageBundle(_FlatBundle):
    """
    A bundle of the data files that ship inside an importable Python package. The identifier is the
    name of the package and the files are read via `importlib.resources`, so the bundle also works
    for packages that are imported from a zip file. Python source files and byte code caches are
    not considered resources.
    """
    _IGNORED_SUFFIXES = ('.py', '.pyc', '.pyo')
    _IGNORED_FOLDERS = ('__pycache__',)

    def __init__(self, package: str | ModuleType):
        if isinstance(package, str):
            package = import_module(package)
        super().__init__(package.__name__)
        self.package = package

    def _walk(self):
        def walk(node, prefix: str):
            for child in sorted(node.iterdir(), key=lambda t: t.name):
                path = F'{prefix}{child.name}'
                if child.is_dir():
                    if child.name not in self._IGNORED_FOLDERS:
                        yield from walk(child, F'{path}/')
                elif not child.name.endswith(self._IGNORED_SUFFIXES):
                    yield path, child
        yield from walk(resources.files(self.package), '')

    def _open(self, member):
        return member.open('rb')
