"""
Common utility functions and exceptions for xsd2codemirror.
"""

from typing import Hashable, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar('T', bound=Hashable)


class SchemaConversionError(Exception):
    """
    Base class for all failures of the XSD to CodeMirror conversion.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
        cause: Optional underlying exception that caused this error
    """

    def __init__(self, message: str, context: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.message = message
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class SchemaLoadError(SchemaConversionError):
    """Raised when the schema file cannot be read or compiled."""


class SchemaNotCompiledError(SchemaConversionError):
    """Raised when elements are requested before the schema was compiled."""

    def __init__(self) -> None:
        super().__init__("Schema is not compiled yet.")


class UnsupportedConstructError(SchemaConversionError):
    """
    Raised when a content particle kind outside the supported set is found.

    Attributes:
        kind: The kind of the offending particle (e.g. 'all')
        location: Source location of the particle, or an internal identifier
    """

    def __init__(self, kind: str, location: str) -> None:
        self.kind = kind
        self.location = location
        super().__init__(f"Unsupported schema construct: {kind}", context=location)


class CycleError(SchemaConversionError):
    """
    Raised when group dependencies cannot be closed.

    Attributes:
        groups: Descriptions of the group particles still holding dependencies
    """

    def __init__(self, groups: List[str]) -> None:
        self.groups = groups
        super().__init__(
            "There is a cycle in the schema, can't figure it out: " + ', '.join(groups))


def split_qname(name: Optional[str]) -> Tuple[str, str]:
    """
    Split an extended name in Clark notation into (namespace, local name).

    >>> split_qname('{urn:a}b')
    ('urn:a', 'b')
    >>> split_qname('b')
    ('', 'b')
    """
    if not name:
        return '', ''
    if name[0] == '{':
        namespace, _, local_name = name[1:].partition('}')
        return namespace, local_name
    return '', name


def dedupe(items: Iterable[T]) -> List[T]:
    """Remove duplicates, keeping the first occurrence of each item."""
    seen = set()
    result: List[T] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
