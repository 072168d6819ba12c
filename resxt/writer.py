#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Writing the resources of a bundle to disk. The writer maps resource names back to a directory
structure using `resxt.lib.names.decode` and copies the resource streams into files that are
created with the storage provider, which is a `resxt.lib.storage.LocalStorage` by default. All
write operations are coroutines:

    writer = ResourceWriter(ZipBundle('App.zip'))
    await writer.write_folder('icons', 'out')
    await writer.write_file('data/db.sqlite', 'out')

A recursive folder write treats every period in a resource name as a path delimiter, except for
the last one, which is assumed to delimit the file extension. A non-recursive folder write treats
all periods as part of the file name.
"""
from __future__ import annotations

import asyncio

from pathlib import Path

from resxt.lib.bundle import Bundle
from resxt.lib.environment import environment, logger
from resxt.lib.names import basename, decode, relative_path, resource_name, resource_prefix
from resxt.lib.storage import CollisionPolicy, LocalStorage
from resxt.lib.types import pathlike
from resxt.loader import ResourceLoader

__all__ = ['ResourceWriter']


class ResourceWriter:
    """
    Writes the resources of one bundle to the given storage. The `buffer_size` is the number of
    bytes that are copied at once and defaults to the value of `RESXT_BUFFER_SIZE`.
    """
    def __init__(
        self,
        bundle: Bundle,
        storage: LocalStorage | None = None,
        buffer_size: int | None = None,
    ):
        if buffer_size is None:
            buffer_size = environment.buffer_size.value
        if buffer_size <= 0:
            raise ValueError(F'The buffer size must be positive, got {buffer_size}.')
        self.bundle = bundle
        self.loader = ResourceLoader(bundle)
        self.storage = storage or LocalStorage()
        self.buffer_size = buffer_size
        self.log = logger(__name__)

    @property
    def identifier(self) -> str:
        return self.bundle.identifier

    def resources(self, source_directory: str = '') -> list[str]:
        """
        List the names of all resources below the given source directory, sorted by name.
        """
        prefix = resource_prefix(self.identifier, source_directory)
        return sorted(name for name in self.bundle.names() if name.startswith(prefix))

    async def write_folder(
        self,
        source_directory: str,
        target_directory: pathlike = '',
        recursive: bool = True,
        policy: CollisionPolicy = CollisionPolicy.REPLACE_EXISTING,
        parallel: bool = False,
    ) -> list[Path]:
        """
        Write all resources from a folder of the bundle to the target directory. Resources from
        subfolders are written to the corresponding subfolders when `recursive` is set. Returns
        the list of written paths; it is empty if the folder has no resources.
        """
        prefix = resource_prefix(self.identifier, source_directory)
        targets = []
        for name in self.resources(source_directory):
            relative = relative_path(decode(name[len(prefix):], recursive), self.storage.separator)
            targets.append((self.storage.path(target_directory, relative), name))
        if not targets:
            self.log.info(F'no resources with prefix {prefix}')
            return []
        if parallel:
            return list(await asyncio.gather(*(
                self._write(path, name, policy) for path, name in targets)))
        return [await self._write(path, name, policy) for path, name in targets]

    async def write_file(
        self,
        source: str,
        target_directory: pathlike = '',
        policy: CollisionPolicy = CollisionPolicy.REPLACE_EXISTING,
    ) -> Path:
        """
        Write the resource for a single file of the bundle to the target directory. The source is a
        path relative to the root of the bundle; the written file receives its final segment as the
        file name.
        """
        resource = resource_name(self.identifier, source)
        file_name = self.storage.path(target_directory, relative_path(basename(source)))
        return await self.write_resource(file_name, resource, policy)

    async def write_resource(
        self,
        file_name: pathlike,
        resource: str,
        policy: CollisionPolicy = CollisionPolicy.REPLACE_EXISTING,
    ) -> Path:
        """
        Write a resource to the given path, creating all parent folders. The resource is resolved
        like any other query with `resxt.loader.ResourceLoader`. If the copy fails midway, the
        partially written file remains on disk.
        """
        return await self._write(file_name, self.loader.resolve(resource), policy)

    async def _write(self, file_name: pathlike, name: str, policy: CollisionPolicy) -> Path:
        path = self.storage.path(file_name)
        if not await self.storage.folder_exists(path.parent):
            await self.storage.create_folder(path.parent)
        path = await self.storage.create_file(path, policy)
        self.log.info(F'writing {name} to {path}')
        total = 0
        with self.bundle.open(name) as stream:
            async with self.storage.open_file(path) as output:
                while chunk := await asyncio.to_thread(stream.read, self.buffer_size):
                    await output.write(chunk)
                    total += len(chunk)
                await output.flush()
        self.log.debug(F'wrote 0x{total:08X} bytes to {path}')
        return path
