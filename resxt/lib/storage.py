#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The storage provider that resources are written to. All operations that touch the file system are
coroutines based on `aiofiles`; they suspend only while waiting for file system I/O. Relative paths
are interpreted relative to the root of the storage, which defaults to the value of the environment
variable `RESXT_STORAGE_ROOT` or the current working directory.
"""
from __future__ import annotations

import aiofiles
import aiofiles.os

from enum import IntEnum
from pathlib import Path

from resxt.lib.environment import environment, logger
from resxt.lib.types import pathlike

__all__ = [
    'CollisionPolicy',
    'LocalStorage',
]


class CollisionPolicy(IntEnum):
    """
    Determines what happens when a file is created at a path where a file already exists.
    """
    GENERATE_UNIQUE_NAME = 0
    """
    Pick a new name of the form `stem (N).ext` with the smallest `N >= 2` that is not taken.
    """
    REPLACE_EXISTING = 1
    """
    Truncate the existing file.
    """
    FAIL = 2
    """
    Raise a `FileExistsError` and leave the existing file untouched.
    """
    OPEN_EXISTING = 3
    """
    Keep the existing file and its contents; data is written starting at offset zero, so a tail of
    the old contents remains when the new data is shorter.
    """


class LocalStorage:
    """
    Storage on the local file system, rooted at the given folder.
    """
    separator = '/'

    def __init__(self, root: pathlike | None = None):
        if root is None:
            root = environment.storage_root.value or Path.cwd()
        self.root = Path(root).absolute()
        self.log = logger(__name__)

    def __repr__(self):
        return F'<{self.__class__.__name__}:{self.root}>'

    def path(self, *parts: pathlike) -> Path:
        """
        Join the given parts to a path. Relative paths are resolved against the storage root, an
        absolute part discards everything that precedes it.
        """
        return self.root.joinpath(*parts)

    async def folder_exists(self, path: pathlike) -> bool:
        return await aiofiles.os.path.isdir(self.path(path))

    async def create_folder(self, path: pathlike) -> Path:
        """
        Create the given folder and all of its parents. Succeeds if the folder exists already,
        which makes it safe to call concurrently for the same path.
        """
        path = self.path(path)
        await aiofiles.os.makedirs(path, exist_ok=True)
        self.log.debug(F'folder available: {path}')
        return path

    async def create_file(self, path: pathlike, policy: CollisionPolicy = CollisionPolicy.FAIL) -> Path:
        """
        Create an empty file, or handle an existing file according to the given policy. The return
        value is the path of the created file, which only differs from the input path when the
        policy is `resxt.lib.storage.CollisionPolicy.GENERATE_UNIQUE_NAME`.
        """
        path = self.path(path)
        policy = CollisionPolicy(policy)
        if policy is CollisionPolicy.GENERATE_UNIQUE_NAME:
            return await self._create_unique(path)
        mode = {
            CollisionPolicy.FAIL: 'xb',
            CollisionPolicy.REPLACE_EXISTING: 'wb',
            CollisionPolicy.OPEN_EXISTING: 'ab',
        }[policy]
        async with aiofiles.open(path, mode):
            pass
        return path

    async def _create_unique(self, path: Path) -> Path:
        stem = path.stem
        counter = 1
        candidate = path
        while True:
            try:
                async with aiofiles.open(candidate, 'xb'):
                    pass
            except FileExistsError:
                counter += 1
                candidate = path.with_name(F'{stem} ({counter}){path.suffix}')
            else:
                if candidate != path:
                    self.log.info(F'file exists, using unique name: {candidate.name}')
                return candidate

    def open_file(self, path: pathlike):
        """
        Open an existing file for writing without truncating it. The return value is an async
        context manager which yields an `aiofiles` file object.
        """
        return aiofiles.open(self.path(path), 'r+b')
