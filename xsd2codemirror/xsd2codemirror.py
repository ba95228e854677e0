"""

Command line utility to convert an XML Schema into a CodeMirror XML hint schema.

"""

import argparse
import logging
import sys
import traceback

from xsd2codemirror import _version
from xsd2codemirror.xsdtocodemirror import convert_xsd_to_codemirror


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the command line utility."""
    parser = argparse.ArgumentParser(
        description='Convert an XML Schema into a CodeMirror XML hint schema.')
    parser.add_argument('--version', action='store_true', help='Print the version of xsd2codemirror.')
    parser.add_argument('xsd', nargs='?', help='Path to the XSD file.')
    parser.add_argument('-v', '-verbose', '--verbose', dest='verbose', action='store_true',
                        help='Trace the schema walk on stderr.')
    parser.add_argument('-prefix', '--prefix', dest='prefix', nargs=2, action='append',
                        metavar=('NAMESPACE', 'PREFIX'), default=None,
                        help='Prefix to use for a namespace. May be repeated.')
    parser.add_argument('--target-namespace', dest='target_namespace', default=None,
                        help='Target namespace to compile the schema with.')
    parser.add_argument('--out', default=None, help='Output JSON file. Defaults to stdout.')
    parser.add_argument('--compact', action='store_true', help='Write JSON without indentation.')
    return parser


def main():
    """Main function for the command line utility."""
    parser = create_parser()
    args = parser.parse_args()

    if getattr(args, 'version', False):
        print(f'xsd2codemirror {_version.version}')
        return

    if not getattr(args, 'xsd', None):
        parser.print_help()
        return

    verbose = getattr(args, 'verbose', False)
    logging.basicConfig(stream=sys.stderr, format='%(message)s',
                        level=logging.DEBUG if verbose else logging.WARNING)

    namespace_prefixes = {}
    for namespace, prefix in getattr(args, 'prefix', None) or []:
        namespace_prefixes[namespace] = prefix

    try:
        out = getattr(args, 'out', None)
        json_text = convert_xsd_to_codemirror(
            args.xsd,
            out,
            namespace_prefixes=namespace_prefixes,
            target_namespace=getattr(args, 'target_namespace', None),
            pretty=not getattr(args, 'compact', False))
        if not out:
            print(json_text)
    except Exception as e:  # pylint: disable=broad-except
        print(type(e).__name__, file=sys.stderr)
        print(str(e), file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
