import argparse
import io
import os
import sys
import tempfile
import unittest
from unittest.mock import patch

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from swiftize.swiftize import main, load_commands
from swiftize import _version


def get_json():
    """Provides the JSON input file path."""
    return os.path.join(os.path.dirname(__file__), 'json', 'profile.json')


class TestMain(unittest.TestCase):

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command=None))
    def test_main_no_command(self, mock_parse_args):
        """Test main function with no command."""
        with patch('argparse.ArgumentParser.print_help') as mock_help:
            main()
        mock_help.assert_called_once()

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command=None, version=True))
    def test_main_version(self, mock_parse_args):
        """Test main function with --version."""
        with patch('builtins.print') as mock_print:
            main()
        mock_print.assert_called_once_with(f'Swiftize {_version.version}')

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command='j2swift', input=get_json(), out=tempfile.gettempdir() + '/swiftize_test/Profile.swift', root_name='Profile'))
    def test_main_j2swift_command(self, mock_parse_args):
        """Test main function with j2swift command."""
        main()
        output_path = tempfile.gettempdir() + '/swiftize_test/Profile.swift'
        assert os.path.exists(output_path)
        with open(output_path, 'r', encoding='utf-8') as f:
            self.assertIn("struct Profile: Codable {", f.read())

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command='j2swift', input=get_json(), out=None, dedupe='structure', sample_arrays=True, coding_keys=True, indent=2))
    def test_main_j2swift_to_stdout(self, mock_parse_args):
        """Test main function writing to stdout."""
        with patch('sys.stdout', new_callable=io.StringIO) as mock_stdout:
            main()
        output = mock_stdout.getvalue()
        self.assertTrue(output.startswith("// 📝 Formatted JSON:"))
        self.assertIn("struct SessionElement: Codable {", output)
        self.assertIn("    let ip: String?\n", output)
        self.assertIn('        case _2fa = "2fa"', output)

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command='j2swift', input=None, out=None))
    def test_main_j2swift_from_stdin(self, mock_parse_args):
        """Test main function reading from stdin."""
        with patch('sys.stdin', io.StringIO('{"a": 1}')), patch('sys.stdout', new_callable=io.StringIO) as mock_stdout:
            main()
        self.assertIn("struct JSONModel: Codable {\n    let a: Int\n}", mock_stdout.getvalue())

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command='j2swift', input=None, out=None))
    def test_main_j2swift_invalid_json(self, mock_parse_args):
        """Invalid JSON is reported in the output, not as a failure."""
        with patch('sys.stdin', io.StringIO('{"a":}')), patch('sys.stdout', new_callable=io.StringIO) as mock_stdout:
            main()
        self.assertTrue(mock_stdout.getvalue().startswith("// Error JSON parsing: "))

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command='j2swift', input='does-not-exist.json', out=None))
    def test_main_missing_input(self, mock_parse_args):
        """A missing input file exits with status 1."""
        with patch('builtins.print') as mock_print:
            with self.assertRaises(SystemExit) as ctx:
                main()
        self.assertEqual(ctx.exception.code, 1)
        self.assertEqual(mock_print.call_args_list[0].args[0], "Error: ")


class TestCommands(unittest.TestCase):

    def test_commands_target_existing_functions(self):
        for command in load_commands():
            module_name, func_name = command['function']['name'].rsplit('.', 1)
            module = __import__(module_name, fromlist=[func_name])
            self.assertTrue(callable(getattr(module, func_name)))

    def test_parse_j2swift_arguments(self):
        with patch.object(sys, 'argv', ['swiftize', 'j2swift', 'in.json', '--out', 'Out.swift', '--dedupe', 'structure', '--sample-arrays', '--indent', '4']), \
                patch('swiftize.jsontoswift.convert_json_to_swift') as mock_convert, \
                patch('builtins.print'):
            main()
        mock_convert.assert_called_once_with(
            json_file_path='in.json', swift_file_path='Out.swift', root_name='JSONModel',
            array_root_name='ArrayElement', dedupe='structure', sample_arrays=True,
            coding_keys=False, indent=4)


if __name__ == '__main__':
    unittest.main()
