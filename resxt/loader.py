#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Locating resources inside a bundle. A query is matched against the end of every resource name in
the bundle, ignoring case. A query must match exactly one resource: If no resource matches, a
`resxt.loader.ResourceNotFound` is raised, and if more than one resource matches, the lookup fails
with `resxt.loader.AmbiguousResource`, which lists every candidate. The loader never guesses; the
caller has to use a longer, more specific query in that case.

    loader = ResourceLoader(bundle)
    config = loader.text('settings.json')
"""
from __future__ import annotations

import codecs

from resxt.lib.bundle import Bundle
from resxt.lib.environment import logger
from resxt.lib.types import BinaryIO, Iterable

__all__ = [
    'AmbiguousResource',
    'ResourceLoader',
    'ResourceLookupError',
    'ResourceNotFound',
    'resolve',
]

_log = logger(__name__)


class ResourceLookupError(LookupError):
    """
    The base class for all errors that occur when a resource query can not be resolved to exactly
    one resource. The property `query` contains the query that failed.
    """
    def __init__(self, query: str, message: str):
        super().__init__(message)
        self.query = query


class ResourceNotFound(ResourceLookupError):
    def __init__(self, query: str):
        super().__init__(query, F'Resource ending with {query} not found.')


class AmbiguousResource(ResourceLookupError):
    """
    Raised when a query matches several resources. The property `matches` contains the names of
    all of them.
    """
    def __init__(self, query: str, matches: list[str]):
        listing = '\n'.join(matches)
        super().__init__(query, F'Multiple resources ending with {query} found:\n{listing}')
        self.matches = matches


def resolve(names: Iterable[str], query: str) -> str:
    """
    Return the only name from `names` that ends with `query`, ignoring case.
    """
    suffix = query.casefold()
    matches = [name for name in names if name.casefold().endswith(suffix)]
    if not matches:
        raise ResourceNotFound(query)
    if len(matches) > 1:
        raise AmbiguousResource(query, matches)
    match, = matches
    return match


class ResourceLoader:
    """
    Provides access to the resources of a single bundle. Every accessor first resolves the query
    using `resxt.loader.resolve` and therefore fails in the same way.
    """
    def __init__(self, bundle: Bundle):
        self.bundle = bundle

    def names(self) -> list[str]:
        return sorted(self.bundle.names())

    def resolve(self, query: str) -> str:
        name = resolve(self.bundle.names(), query)
        _log.debug(F'resolved {query} to {name}')
        return name

    def stream(self, query: str) -> BinaryIO:
        """
        Open the resource matching the query. The caller is responsible for closing the stream.
        """
        return self.bundle.open(self.resolve(query))

    def read(self, query: str) -> bytes:
        with self.stream(query) as stream:
            return stream.read()

    def text(self, query: str, encoding: str = 'utf8', errors: str = 'strict') -> str:
        with self.stream(query) as stream:
            reader = codecs.getreader(encoding)(stream, errors)
            return reader.read()
