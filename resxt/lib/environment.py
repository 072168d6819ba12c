#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
A common interface to all resxt configuration settings available via environment variables. This
module is also host to the logging configuration. The following variables are recognized:

- `RESXT_VERBOSITY`: Either the name of a `resxt.lib.environment.LogLevel` or a verbosity count.
- `RESXT_BUFFER_SIZE`: The size of the buffer used when copying resources to disk.
- `RESXT_STORAGE_ROOT`: The root folder used by `resxt.lib.storage.LocalStorage` by default.
"""
from __future__ import annotations

import os
import logging

from enum import IntEnum
from pathlib import Path
from typing import Optional, TypeVar, Generic

_T = TypeVar('_T')

Logger = logging.Logger


class LogLevel(IntEnum):
    """
    An enumeration representing the current log level:
    """
    DETACHED = logging.CRITICAL + 100
    """
    The library is used from code that does not want any log output. The only way to communicate
    problems is to throw an exception.
    """
    NONE = logging.CRITICAL + 50

    @classmethod
    def FromVerbosity(cls, verbosity: int):
        if verbosity < 0:
            return cls.DETACHED
        return {
            0: cls.WARNING,
            1: cls.INFO,
            2: cls.DEBUG
        }.get(verbosity, cls.DEBUG)

    NOTSET   = logging.NOTSET    # noqa
    CRITICAL = logging.CRITICAL  # noqa
    FATAL    = logging.FATAL     # noqa
    ERROR    = logging.ERROR     # noqa
    WARNING  = logging.WARNING   # noqa
    WARN     = logging.WARN      # noqa
    INFO     = logging.INFO      # noqa
    DEBUG    = logging.DEBUG     # noqa


class ResxtFormatter(logging.Formatter):

    NAMES = {
        logging.CRITICAL : 'failure',
        logging.ERROR    : 'failure',
        logging.WARNING  : 'warning',
        logging.INFO     : 'comment',
        logging.DEBUG    : 'verbose',
    }

    def __init__(self, format, **kwargs):
        super().__init__(format, **kwargs)

    def formatMessage(self, record: logging.LogRecord) -> str:
        record.custom_level_name = self.NAMES.get(record.levelno, 'message')
        return super().formatMessage(record)


def logger(name: str) -> logging.Logger:
    """
    Obtain a logger which is configured with the default resxt format. Its level is taken from the
    `RESXT_VERBOSITY` environment variable and defaults to `resxt.lib.environment.LogLevel.WARNING`.
    """
    logger = logging.getLogger(name)
    if not logger.hasHandlers():
        stream = logging.StreamHandler()
        stream.setFormatter(ResxtFormatter(
            '({asctime}) {custom_level_name} in {name}: {message}',
            style='{',
            datefmt='%H:%M:%S',
        ))
        logger.addHandler(stream)
        logger.setLevel(environment.verbosity.value or LogLevel.WARNING)
    logger.propagate = False
    return logger


class EnvironmentVariableSetting(Generic[_T]):
    key: str
    value: Optional[_T]

    def __init__(self, name: str, default: Optional[_T] = None):
        self.key = F'RESXT_{name}'
        self.default = default
        self.value = self.read()

    def read(self) -> Optional[_T]:
        return self.default


class EVInt(EnvironmentVariableSetting[int]):
    def read(self):
        try:
            return int(os.environ[self.key], 0)
        except (KeyError, ValueError):
            return self.default or 0


class EVPath(EnvironmentVariableSetting[Path]):
    def read(self):
        value = os.environ.get(self.key, '').strip()
        if not value:
            return self.default
        return Path(value).expanduser()


class EVLog(EnvironmentVariableSetting[Optional[LogLevel]]):
    def read(self):
        try:
            loglevel = os.environ[self.key]
        except KeyError:
            return None
        if loglevel.isdigit():
            return LogLevel.FromVerbosity(int(loglevel))
        try:
            loglevel = LogLevel[loglevel.upper()]
        except KeyError:
            levels = ', '.join(ll.name for ll in LogLevel)
            logging.getLogger(__name__).warning(
                F'ignoring unknown verbosity "{loglevel!r}"; pick from: {levels}')
            return None
        else:
            return loglevel


class environment:
    verbosity = EVLog('VERBOSITY')
    buffer_size = EVInt('BUFFER_SIZE', 0x400)
    storage_root = EVPath('STORAGE_ROOT')
