"""Constants for the xsd2codemirror package."""

XSD_NAMESPACE = 'http://www.w3.org/2001/XMLSchema'
XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'
XSI_NAMESPACE = 'http://www.w3.org/2001/XMLSchema-instance'

# Namespaces whose global declarations never show up in the generated hints
BUILTIN_NAMESPACES = (XSD_NAMESPACE, XML_NAMESPACE, XSI_NAMESPACE)

# Upper bound on dependency closure rounds. One round closes one level of
# group nesting, so this only trips on a defect or a real cycle.
MAX_CLOSURE_ROUNDS = 100

# Generated prefixes are ns0, ns1, ... in first-encounter order
GENERATED_PREFIX_BASE = 'ns'

TOP_ELEMENTS_KEY = '!top'
