"""Trace logging with nested indentation for the recursive schema walk."""

import logging
from contextlib import contextmanager
from typing import Iterator

INDENT = '  '


class IndentingLogger(logging.LoggerAdapter):
    """
    Logger adapter that prefixes every message with the current nesting depth.

    Usage:
        log = IndentingLogger(logging.getLogger(__name__))
        log.debug("Attributes")
        with log.indent():
            log.debug("%s", name)
    """

    def __init__(self, logger: logging.Logger) -> None:
        super().__init__(logger, {})
        self.depth = 0

    def process(self, msg, kwargs):
        return f'{INDENT * self.depth}{msg}', kwargs

    @contextmanager
    def indent(self) -> Iterator['IndentingLogger']:
        """Indent nested log lines; the prior depth is restored on exit."""
        self.depth += 1
        try:
            yield self
        finally:
            self.depth -= 1
