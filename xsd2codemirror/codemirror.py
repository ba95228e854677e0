"""
Renders simple element definitions as a CodeMirror XML hint schema.

The output has the shape expected by the CodeMirror xml-hint addon:

    {
        "!top": ["top"],
        "top": {
            "attrs": {"lang": ["en", "de", "fr", "nl"], "freeform": null},
            "children": ["animal", "plant"]
        },
        "animal": {"attrs": {"isduck": ["yes", "no"]}, "children": ["wings", "feet"]},
        "plant": {},
        "wings": {},
        "feet": {}
    }
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from xsd2codemirror.constants import GENERATED_PREFIX_BASE, TOP_ELEMENTS_KEY
from xsd2codemirror.simplexml import SimpleXmlElement

logger = logging.getLogger(__name__)


class CodeMirrorSchemaSerializer:
    """
    Serializes SimpleXmlElements. Namespaced names are written as prefix:name;
    namespaces without an explicit prefix get ns0, ns1, ... in the order they
    are first encountered. An explicit empty prefix writes names unprefixed.
    """

    def __init__(self, elements: Iterable[SimpleXmlElement],
                 namespace_prefixes: Optional[Dict[str, str]] = None,
                 pretty: bool = True) -> None:
        self.elements = list(elements)
        self.namespace_prefixes: Dict[str, str] = dict(namespace_prefixes or {})
        self.pretty = pretty
        self.ns_counter = 0

    def set_prefix(self, namespace: str, prefix: str):
        self.namespace_prefixes[namespace] = prefix

    def get_prefix(self, namespace: str) -> str:
        prefix = self.namespace_prefixes.get(namespace)
        if prefix is None:
            used = set(self.namespace_prefixes.values())
            prefix = f'{GENERATED_PREFIX_BASE}{self.ns_counter}'
            while prefix in used:
                self.ns_counter += 1
                prefix = f'{GENERATED_PREFIX_BASE}{self.ns_counter}'
            self.ns_counter += 1
            self.namespace_prefixes[namespace] = prefix
        return prefix

    def display_name(self, namespace: str, name: str) -> str:
        if not namespace:
            return name
        prefix = self.get_prefix(namespace)
        if not prefix:
            return name
        return f'{prefix}:{name}'

    def to_dict(self) -> Dict[str, Any]:
        schema_info: Dict[str, Any] = {}
        top: List[str] = [self.display_name(e.namespace, e.name) for e in self.elements if e.is_top_level]
        if top:
            schema_info[TOP_ELEMENTS_KEY] = top
        for element in self.elements:
            key = self.display_name(element.namespace, element.name)
            if key in schema_info:
                logger.debug("Skipping another declaration of %s", key)
                continue
            schema_info[key] = self.element_info(element)
        return schema_info

    def element_info(self, element: SimpleXmlElement) -> Dict[str, Any]:
        info: Dict[str, Any] = {}
        if element.attributes:
            info['attrs'] = {
                attribute.name: list(attribute.possible_values) if attribute.possible_values else None
                for attribute in element.attributes
            }
        if element.children:
            info['children'] = [self.display_name(child.namespace, child.name) for child in element.children]
        return info

    def to_json_string(self) -> str:
        if self.pretty:
            return json.dumps(self.to_dict(), indent=2)
        return json.dumps(self.to_dict(), separators=(',', ':'))
