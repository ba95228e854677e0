"""
Parses a compiled XML schema into simple element definitions.

The parser walks every global element of the schema and recursively visits
the particles of its content model, producing one SimpleXmlElement per element
declaration with its attributes and the elements that may appear inside it.

An element declared in multiple contexts is recorded once per declaration;
the serializer outputs the first one.
"""

# pylint: disable=too-many-branches

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from xmlschema.validators import XsdAnyAttribute

from xsd2codemirror.common import SchemaNotCompiledError, UnsupportedConstructError, dedupe, split_qname
from xsd2codemirror.constants import MAX_CLOSURE_ROUNDS
from xsd2codemirror.dependency_resolver import GroupCache, GroupChildSet, close_group_dependencies
from xsd2codemirror.schemasource import (GROUP_MODELS, content_particle, dereference_group,
                                         describe_particle, enumeration_values,
                                         iter_global_elements, load_schema, particle_kind)
from xsd2codemirror.simplexml import QualifiedName, SimpleXmlAttribute, SimpleXmlElement
from xsd2codemirror.tracing import IndentingLogger

logger = logging.getLogger(__name__)


@dataclass
class _RegistryEntry:
    particle: Any  # keeps the particle alive so its id() stays unique
    element: SimpleXmlElement
    group_key: Optional[int] = None


class ElementResolver:
    """
    One resolution pass over a compiled schema. Owns the element registry and
    the group cache; create a new instance for every pass.
    """

    def __init__(self, log: Optional[IndentingLogger] = None, max_rounds: int = MAX_CLOSURE_ROUNDS):
        self.log = log or IndentingLogger(logger)
        self.max_rounds = max_rounds
        self.elements: Dict[int, _RegistryEntry] = {}
        self.group_cache = GroupCache()

    def resolve(self, global_elements: Iterable[Any]) -> List[SimpleXmlElement]:
        """ Resolve all global elements and everything reachable from them. """
        for element in global_elements:
            self.parse_element(element, is_top_level=True)

        close_group_dependencies(self.group_cache, describe_particle, self.max_rounds)

        for entry in self.elements.values():
            if entry.group_key is not None:
                group_children = self.group_cache[entry.group_key].children
                entry.element.children = dedupe(entry.element.children + group_children)
        return [entry.element for entry in self.elements.values()]

    def parse_element(self, element: Any, is_top_level: bool = False) -> QualifiedName:
        """ Register an element declaration and return the name it is addressable by. """
        self.log.debug("Found element %s", describe_particle(element))

        if element.ref is not None:
            return QualifiedName(*split_qname(element.ref.name))

        entry = self.elements.get(id(element))
        if entry is not None:
            return entry.element.qualified_name

        namespace, name = split_qname(element.name)
        entry = _RegistryEntry(element, SimpleXmlElement(name, namespace, is_top_level))
        self.elements[id(element)] = entry

        # a simple type cannot have attributes or children
        element_type = element.type
        if element_type.is_simple():
            return entry.element.qualified_name

        with self.log.indent():
            self.log.debug("Attributes")
            with self.log.indent():
                for attribute in element_type.attributes.values():
                    if isinstance(attribute, XsdAnyAttribute):
                        continue
                    entry.element.attributes.append(self.parse_attribute(attribute))
                    self.log.debug("%s", attribute.local_name)

            particle = content_particle(element_type)
            if particle is not None:
                self.log.debug("Child particle %s", describe_particle(particle))
                with self.log.indent():
                    kind = particle_kind(particle)
                    if kind == 'group_ref':
                        entry.group_key = self.parse_group_ref(particle).key
                    elif kind in GROUP_MODELS:
                        entry.group_key = self.parse_group(particle).key
                    elif kind == 'element':
                        entry.element.children.append(self.parse_element(particle))
                    elif kind != 'any':
                        raise UnsupportedConstructError(kind, describe_particle(particle))

        return entry.element.qualified_name

    def parse_attribute(self, attribute: Any) -> SimpleXmlAttribute:
        namespace, name = split_qname(attribute.name)
        possible_values = enumeration_values(attribute.type)
        return SimpleXmlAttribute(name, namespace, tuple(possible_values) if possible_values else None)

    def parse_group_ref(self, group_ref: Any) -> GroupChildSet:
        """ Parses xs:group ref="..." particles. """
        self.log.debug("Parsing groupRef %s", group_ref.name)
        with self.log.indent():
            return self.parse_group(dereference_group(group_ref))

    def parse_group(self, group: Any) -> GroupChildSet:
        """
        Parses xs:sequence and xs:choice particles.

        The set is cached before its particles are visited, so a group reached
        again while it is being parsed gets the same, possibly unfinished, set.
        Nested groups are recorded as dependencies and merged later by
        close_group_dependencies().
        """
        group_set = self.group_cache.get(group)
        if group_set is not None:
            self.log.debug("Used cache: %s", describe_particle(group))
            return group_set

        kind = particle_kind(group)
        if kind not in GROUP_MODELS:
            raise UnsupportedConstructError(kind, describe_particle(group))

        self.log.debug("Parsing group %s", describe_particle(group))
        group_set = self.group_cache.create(group)
        for particle in group:
            with self.log.indent():
                kind = particle_kind(particle)
                if kind in GROUP_MODELS:
                    group_set.add_dependency(self.parse_group(particle))
                elif kind == 'group_ref':
                    group_set.add_dependency(self.parse_group_ref(particle))
                elif kind == 'element':
                    group_set.add_child(self.parse_element(particle))
                elif kind == 'any':
                    continue
                else:
                    raise UnsupportedConstructError(kind, describe_particle(particle))
        return group_set


class SchemaParser:
    """
    Parses a schema file into simple element definitions, using xmlschema to
    compile it.
    """

    def __init__(self, schema_path: str, target_namespace: Optional[str] = None,
                 max_rounds: int = MAX_CLOSURE_ROUNDS) -> None:
        self.schema_path = schema_path
        self.target_namespace = target_namespace
        self.max_rounds = max_rounds
        self.schema = None
        self.log = IndentingLogger(logger)

    def compile(self):
        """ Compile the schema. Raises SchemaLoadError if it cannot be read. """
        self.log.debug("Reading schema %s", self.schema_path)
        self.schema = load_schema(self.schema_path, self.target_namespace)

    def get_xml_elements(self) -> List[SimpleXmlElement]:
        """ Resolve all elements of the compiled schema in a fresh pass. """
        if self.schema is None:
            raise SchemaNotCompiledError()
        resolver = ElementResolver(self.log, self.max_rounds)
        return resolver.resolve(iter_global_elements(self.schema))
