"""
Access to compiled XML schemas.

The schema is compiled by xmlschema, which resolves includes, imports and
named references. This module hides the few xmlschema specifics the parser
needs: loading, enumerating global elements and classifying particles.
"""

import logging
import os
from typing import Any, Iterator, List, Optional

import xmlschema
from xmlschema.names import XSD_ENUMERATION
from xmlschema.validators import XsdAnyElement, XsdElement, XsdGroup

from xsd2codemirror.common import SchemaLoadError
from xsd2codemirror.constants import BUILTIN_NAMESPACES

logger = logging.getLogger(__name__)

GROUP_MODELS = ('sequence', 'choice')


def load_schema(xsd_path: str, target_namespace: Optional[str] = None) -> xmlschema.XMLSchema:
    """
    Compile the schema at xsd_path. Includes are resolved relative to the file;
    an unreadable include only fails if one of its components is referenced.
    """
    if not os.path.exists(xsd_path):
        raise SchemaLoadError(f"XSD file not found at {xsd_path}")
    try:
        schema = xmlschema.XMLSchema(os.path.abspath(xsd_path), namespace=target_namespace)
    except Exception as e:
        logger.error("Could not compile schema: %s: %s", type(e).__name__, e)
        raise SchemaLoadError(f"Could not compile schema: {type(e).__name__}: {e}",
                              context=xsd_path, cause=e) from e
    logger.debug("Schema compiled...")
    return schema


def iter_global_elements(schema: xmlschema.XMLSchema) -> Iterator[XsdElement]:
    """
    Yield the global elements of the schema and of every schema it imports,
    main schema first, each in declaration order.
    """
    visited = set()
    yielded = set()
    pending: List[Any] = [schema]
    while pending:
        current = pending.pop(0)
        if id(current) in visited:
            continue
        visited.add(id(current))
        if current.target_namespace in BUILTIN_NAMESPACES:
            continue
        for element in current.elements.values():
            if id(element) not in yielded:
                yielded.add(id(element))
                yield element
        pending.extend(imported for imported in current.imports.values() if imported is not None)


def particle_kind(particle: Any) -> str:
    """
    Classify a particle as 'element', 'any', 'group_ref', or by its model group
    ('sequence', 'choice', 'all'). Anything else is reported by class name.
    """
    if isinstance(particle, XsdElement):
        return 'element'
    if isinstance(particle, XsdAnyElement):
        return 'any'
    if isinstance(particle, XsdGroup):
        if particle.ref is not None:
            return 'group_ref'
        return particle.model
    return type(particle).__name__


def content_particle(xsd_type: Any) -> Optional[Any]:
    """Return the content model of a complex type, None for simple content."""
    if xsd_type.is_simple() or xsd_type.has_simple_content():
        return None
    return xsd_type.content


def dereference_group(group_ref: XsdGroup) -> XsdGroup:
    return group_ref.ref


def enumeration_values(simple_type: Any) -> List[str]:
    """Values of the enumeration facet exactly as written, in declaration order."""
    facet = simple_type.get_facet(XSD_ENUMERATION)
    if facet is None:
        return []
    return [elem.get('value') for elem in facet]


def describe_particle(particle: Any) -> str:
    """
    Describe a particle for log lines and error messages, e.g.
    'groups.xsd:Element({urn:example:groups}title)'. Only the file and the
    kind are reported, the parsed tree carries no line numbers. Falls back to
    the id attribute or an internal identifier when the file is unknown.
    """
    kind = particle_kind(particle)
    if kind in ('sequence', 'choice', 'all'):
        desc = kind.capitalize()
    elif kind == 'group_ref':
        desc = 'GroupRef'
    else:
        desc = type(particle).__name__.replace('Xsd', '', 1)
    name = getattr(particle, 'name', None)
    if name and kind in ('element', 'group_ref', 'sequence', 'choice', 'all'):
        desc += f'({name})'

    url = getattr(getattr(particle, 'schema', None), 'url', None)
    if url:
        return f"{os.path.basename(url)}:{desc}"
    elem = getattr(particle, 'elem', None)
    if elem is not None and elem.get('id'):
        return f"{desc}:id:{elem.get('id')}"
    return f"{desc}:{id(particle):#x}"
