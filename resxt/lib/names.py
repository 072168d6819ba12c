#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Translation between file system paths and flattened resource names. Bundles that embed files as
resources store every file under a single name where each path separator has been replaced by a
period, so the file `icons/home.png` of a bundle with identifier `App` becomes the resource
`App.icons.home.png`. This encoding is lossy: A period that was part of a directory or file name
can not be told apart from a period that used to be a path separator.

The function `resxt.lib.names.decode` reverses the encoding with a fixed heuristic: The last
period in a name is the extension delimiter, and every other period is a path separator. Hence,

    >>> decode('big.button.png')
    'big/button.png'

and there is no way to obtain a file that is literally named `big.button.png` when decoding
recursively. Bundle producers rely on exactly this behavior, it must not be made smarter.
"""
from __future__ import annotations

import os
import re

__all__ = [
    'basename',
    'decode',
    'encode',
    'pathspec',
    'relative_path',
    'resource_name',
    'resource_prefix',
    'UnsafePath',
]


class UnsafePath(ValueError):
    """
    Raised by `resxt.lib.names.relative_path` when a path would not end up below the folder it is
    joined to.
    """
    def __init__(self, path: str):
        super().__init__(F'The path {path} does not name a file below its target folder.')
        self.path = path


_SEPARATORS = {'/', '\\', os.sep}
if os.altsep:
    _SEPARATORS.add(os.altsep)

_SEPARATOR_PATTERN = re.compile('[{}]'.format(re.escape(''.join(sorted(_SEPARATORS)))))


def pathspec(path: str) -> str:
    """
    Normalizes a path which is separated by backward or forward slashes to be separated by forward
    slashes. Leading and trailing separators are removed.
    """
    return '/'.join(_SEPARATOR_PATTERN.split(path)).strip('/')


def encode(path: str) -> str:
    """
    Convert a file system style path to the suffix of a resource name by replacing every path
    separator with a period.
    """
    return pathspec(path).replace('/', '.')


def decode(suffix: str, recursive: bool = True, sep: str = '/') -> str:
    """
    Convert the suffix of a resource name back into a relative path. When `recursive` is false,
    the suffix is a flat file name and returned unchanged. Otherwise, the last period is assumed
    to delimit the file extension and all other periods are replaced by `sep`.
    """
    if not recursive:
        return suffix
    stem, dot, extension = suffix.rpartition('.')
    if not dot:
        return suffix
    return F'{stem.replace(".", sep)}.{extension}'


def relative_path(path: str, sep: str = '/') -> str:
    """
    Turn a decoded path into one that stays below the folder it is joined to. Empty segments and
    segments that consist of a single period are dropped, which turns an absolute path into a
    relative one. A name that starts with a period decodes to such a path, because the period
    of a hidden folder like `.cache` is read as a separator. A parent folder reference or an empty
    path raises `resxt.lib.names.UnsafePath`.
    """
    parts = []
    for part in _SEPARATOR_PATTERN.split(path):
        if part in ('', '.'):
            continue
        if part == '..':
            raise UnsafePath(path)
        parts.append(part)
    if not parts:
        raise UnsafePath(path)
    return sep.join(parts)


def basename(path: str) -> str:
    """
    Return the final segment of a path, accepting either slash as a delimiter.
    """
    return pathspec(path).rpartition('/')[2]


def resource_name(identifier: str, path: str) -> str:
    """
    Compute the full name of the resource that a bundle with the given identifier uses for the
    file at the given relative path.
    """
    return F'{identifier}.{encode(path)}'


def resource_prefix(identifier: str, directory: str) -> str:
    """
    Compute the prefix shared by all resource names that originate from the given directory. The
    empty directory refers to the root of the bundle.
    """
    if directory := encode(directory):
        return F'{identifier}.{directory}.'
    return F'{identifier}.'
