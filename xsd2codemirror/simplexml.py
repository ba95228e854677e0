"""Flattened element and attribute model produced by the schema parser."""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple


class QualifiedName(NamedTuple):
    """A namespace-scoped name of an element."""
    namespace: str
    name: str


@dataclass(frozen=True)
class SimpleXmlAttribute:
    """An attribute of an element. No possible values means free-form text."""
    name: str
    namespace: str = ''
    possible_values: Optional[Tuple[str, ...]] = None


@dataclass
class SimpleXmlElement:
    """An element with its attributes and the elements that may appear inside it."""
    name: str
    namespace: str = ''
    is_top_level: bool = False
    attributes: List[SimpleXmlAttribute] = field(default_factory=list)
    children: List[QualifiedName] = field(default_factory=list)

    @property
    def qualified_name(self) -> QualifiedName:
        return QualifiedName(self.namespace, self.name)
