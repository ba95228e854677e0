import argparse
import io
import json
import os
import sys
import tempfile
import unittest
from unittest.mock import patch

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xsd2codemirror.xsd2codemirror import create_parser, main


def get_xsd(name):
    """Provides the XSD input file path."""
    return os.path.join(os.path.dirname(__file__), 'xsd', name)


def cli_args(**kwargs):
    args = dict(version=False, xsd=None, verbose=False, prefix=None,
                target_namespace=None, out=None, compact=False)
    args.update(kwargs)
    return argparse.Namespace(**args)


class TestMain(unittest.TestCase):

    @patch('argparse.ArgumentParser.parse_args', return_value=cli_args())
    def test_main_no_input(self, mock_parse_args):
        """Test main function without an input file."""
        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            main()
        self.assertIn('usage', stdout.getvalue())

    @patch('argparse.ArgumentParser.parse_args', return_value=cli_args(version=True))
    def test_main_version(self, mock_parse_args):
        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            main()
        self.assertTrue(stdout.getvalue().startswith('xsd2codemirror '))

    @patch('argparse.ArgumentParser.parse_args', return_value=cli_args(xsd=get_xsd('animals.xsd'), compact=True))
    def test_main_prints_json(self, mock_parse_args):
        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            main()
        result = json.loads(stdout.getvalue())
        self.assertEqual(result["!top"], ["top"])
        self.assertEqual(result["animal"]["attrs"], {"isduck": ["yes", "no"]})

    @patch('argparse.ArgumentParser.parse_args', return_value=cli_args(
        xsd=get_xsd('ns-main.xsd'), prefix=[['urn:example:a', 'a'], ['urn:example:b', 'b']],
        out=os.path.join(tempfile.gettempdir(), 'xsd2codemirror', 'ns-main.json')))
    def test_main_writes_output_file(self, mock_parse_args):
        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            main()
        self.assertEqual(stdout.getvalue(), '')
        with open(os.path.join(tempfile.gettempdir(), 'xsd2codemirror', 'ns-main.json'), 'r', encoding='utf-8') as f:
            result = json.load(f)
        self.assertEqual(result["!top"], ["a:root", "b:item"])

    @patch('argparse.ArgumentParser.parse_args', return_value=cli_args(xsd=get_xsd('all.xsd')))
    def test_main_failure(self, mock_parse_args):
        with patch('sys.stdout', new_callable=io.StringIO) as stdout, \
                patch('sys.stderr', new_callable=io.StringIO) as stderr:
            with self.assertRaises(SystemExit) as context:
                main()
        self.assertEqual(context.exception.code, 1)
        self.assertEqual(stdout.getvalue(), '')
        self.assertIn('UnsupportedConstructError', stderr.getvalue())
        self.assertIn('Traceback', stderr.getvalue())

    def test_parser_arguments(self):
        args = create_parser().parse_args(
            ['-v', '--prefix', 'urn:a', 'a', '-prefix', 'urn:b', 'b', 'schema.xsd'])
        self.assertTrue(args.verbose)
        self.assertEqual(args.prefix, [['urn:a', 'a'], ['urn:b', 'b']])
        self.assertEqual(args.xsd, 'schema.xsd')


if __name__ == '__main__':
    unittest.main()
