"""Converts XSD to a CodeMirror XML hint schema."""

import logging
import os
from typing import Any, Dict, Optional

from xsd2codemirror.codemirror import CodeMirrorSchemaSerializer
from xsd2codemirror.schemaparser import SchemaParser

logger = logging.getLogger(__name__)


class XSDToCodeMirror:
    """ Convert XSD to a CodeMirror hint schema. """

    def __init__(self, namespace_prefixes: Optional[Dict[str, str]] = None,
                 target_namespace: Optional[str] = None) -> None:
        self.namespace_prefixes: Dict[str, str] = dict(namespace_prefixes or {})
        self.target_namespace = target_namespace

    def create_serializer(self, xsd_path: str, pretty: bool = True) -> CodeMirrorSchemaSerializer:
        parser = SchemaParser(xsd_path, self.target_namespace)
        parser.compile()
        elements = parser.get_xml_elements()
        logger.debug("Resolved %d element declarations", len(elements))
        return CodeMirrorSchemaSerializer(elements, self.namespace_prefixes, pretty)

    def xsd_to_codemirror(self, xsd_path: str) -> Dict[str, Any]:
        """ Convert XSD to the hint schema as a dict. """
        return self.create_serializer(xsd_path).to_dict()

    def convert_xsd_to_codemirror(self, xsd_path: str, json_path: Optional[str] = None,
                                  pretty: bool = True) -> str:
        """ Convert XSD to hint schema JSON, and write it to json_path if given. """
        json_text = self.create_serializer(xsd_path, pretty).to_json_string()
        if json_path:
            directory = os.path.dirname(json_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(json_path, 'w', encoding='utf-8') as f:
                f.write(json_text)
        return json_text


def xsd_to_codemirror(xsd_path: str, namespace_prefixes: Optional[Dict[str, str]] = None,
                      target_namespace: Optional[str] = None) -> Dict[str, Any]:
    """
    Convert XSD to a CodeMirror hint schema.

    Params:
    xsd_path: str - Path to the XSD file.
    namespace_prefixes: dict | None - Prefixes to use for namespaces, keyed by namespace.
    target_namespace: str | None - Target namespace to compile the schema with.
    """
    return XSDToCodeMirror(namespace_prefixes, target_namespace).xsd_to_codemirror(xsd_path)


def convert_xsd_to_codemirror(xsd_path: str, json_path: Optional[str] = None,
                              namespace_prefixes: Optional[Dict[str, str]] = None,
                              target_namespace: Optional[str] = None,
                              pretty: bool = True) -> str:
    """
    Convert XSD to a CodeMirror hint schema and write it to a file.

    Params:
    xsd_path: str - Path to the XSD file.
    json_path: str | None - Path to the JSON output file. Only returned if None.
    namespace_prefixes: dict | None - Prefixes to use for namespaces, keyed by namespace.
    target_namespace: str | None - Target namespace to compile the schema with.
    pretty: bool - Indent the JSON output.
    """
    converter = XSDToCodeMirror(namespace_prefixes, target_namespace)
    return converter.convert_xsd_to_codemirror(xsd_path, json_path, pretty)
