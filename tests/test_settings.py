import os
import logging
import unittest
import tempfile
from pathlib import Path
from unittest.mock import patch, MagicMock

from pydantic import ValidationError

from servemux import servemux as cli
from servemux.library.config_utils import load_yaml_file, listener_section
from servemux.library.exceptions import ListenerBindError
from servemux.constants import LOG_LEVEL
from servemux.logging_setup import setup_logging
from servemux.settings import MuxSettings, SimpleSettings, get_settings


# -------------------------------------------------------------------
# 1) TEST SETTINGS
# -------------------------------------------------------------------
class TestListenerSettings(unittest.TestCase):

    def setUp(self):
        patcher = patch.dict(os.environ, {}, clear=False)
        patcher.start()
        self.addCleanup(patcher.stop)
        for key in list(os.environ):
            if key.startswith('SERVEMUX_'):
                del os.environ[key]

    def test_defaults(self):
        mux = get_settings('mux')
        simple = get_settings('simple')
        self.assertIsInstance(mux, MuxSettings)
        self.assertIsInstance(simple, SimpleSettings)
        self.assertEqual(mux.port, 8080)
        self.assertEqual(simple.port, 3000)
        self.assertEqual(mux.host, '0.0.0.0')
        self.assertEqual(mux.log_level, 'WARNING')

    def test_environment_override(self):
        os.environ['SERVEMUX_MUX_PORT'] = '9090'
        os.environ['SERVEMUX_SIMPLE_HOST'] = '127.0.0.1'
        self.assertEqual(get_settings('mux').port, 9090)
        self.assertEqual(get_settings('simple').host, '127.0.0.1')
        self.assertEqual(get_settings('simple').port, 3000)

    def test_explicit_override_beats_environment(self):
        os.environ['SERVEMUX_MUX_PORT'] = '9090'
        self.assertEqual(get_settings('mux', port=9191).port, 9191)

    def test_none_overrides_are_ignored(self):
        self.assertEqual(get_settings('simple', port=None, host=None).port, 3000)

    def test_log_level_is_normalised(self):
        settings = get_settings('mux', log_level='debug')
        self.assertEqual(settings.log_level, 'DEBUG')
        self.assertEqual(settings.numeric_log_level, 10)

    def test_invalid_values(self):
        with self.assertRaises(ValidationError):
            get_settings('mux', log_level='chatty')
        with self.assertRaises(ValidationError):
            get_settings('mux', port=70000)


# -------------------------------------------------------------------
# 2) TEST CONFIG FILES
# -------------------------------------------------------------------
class TestConfigFiles(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.root = Path(self.tmpdir.name)

    def write(self, name, text):
        path = self.root / name
        path.write_text(text, encoding='utf-8')
        return path

    def test_load_yaml_file(self):
        path = self.write('servemux.yaml', "log_level: INFO\nmux:\n  port: 8081\n")
        self.assertEqual(load_yaml_file(path), {'log_level': 'INFO', 'mux': {'port': 8081}})

    def test_empty_file_means_no_overrides(self):
        path = self.write('empty.yaml', "")
        self.assertEqual(load_yaml_file(path), {})

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_yaml_file(self.root / 'missing.yaml')

    def test_not_a_mapping(self):
        path = self.write('list.yaml', "- a\n- b\n")
        with self.assertRaises(ValueError):
            load_yaml_file(path)

    def test_malformed_yaml(self):
        path = self.write('bad.yaml', "mux: [unclosed\n")
        with self.assertRaises(ValueError):
            load_yaml_file(path)

    def test_listener_section_merges_top_level(self):
        config = {'log_level': 'INFO', 'host': '127.0.0.1', 'mux': {'port': 8081, 'host': '::1'}}
        keys = ('host', 'port', 'log_level')
        self.assertEqual(listener_section(config, 'mux', keys),
                         {'log_level': 'INFO', 'host': '::1', 'port': 8081})
        self.assertEqual(listener_section(config, 'simple', keys),
                         {'log_level': 'INFO', 'host': '127.0.0.1'})

    def test_listener_section_ignores_unknown_keys(self):
        with self.assertLogs('servemux.library.config_utils', level='WARNING'):
            section = listener_section({'mux': {'colour': 'blue'}}, 'mux', ('port',))
        self.assertEqual(section, {})

    def test_listener_section_must_be_mapping(self):
        with self.assertRaises(ValueError):
            listener_section({'mux': 8080}, 'mux', ('port',))


# -------------------------------------------------------------------
# 3) TEST LOGGING SETUP
# -------------------------------------------------------------------
class TestLoggingSetup(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        saved = (root.level, list(root.handlers))

        def restore():
            root.handlers[:] = saved[1]
            root.setLevel(saved[0])
        self.addCleanup(restore)

    def test_default_level_is_project_level(self):
        root = setup_logging()
        self.assertIs(root, logging.getLogger())
        self.assertEqual(root.level, logging.getLevelName(LOG_LEVEL))

    def test_repeated_setup_keeps_one_handler(self):
        setup_logging('DEBUG')
        root = setup_logging('INFO')
        self.assertEqual(len(root.handlers), 1)
        self.assertEqual(root.level, logging.INFO)


# -------------------------------------------------------------------
# 4) TEST COMMAND LINE
# -------------------------------------------------------------------
class TestCommandLine(unittest.TestCase):

    def test_parse_defaults(self):
        args = cli.parse_args([])
        self.assertEqual(args.listener, 'mux')
        self.assertIsNone(args.port)
        self.assertIsNone(args.log_level)

    def test_parse_options(self):
        args = cli.parse_args(['simple', '--port', '3001', '-l', 'DEBUG'])
        self.assertEqual(args.listener, 'simple')
        self.assertEqual(args.port, 3001)
        self.assertEqual(args.log_level, 'DEBUG')

    def test_unknown_listener_rejected(self):
        with patch('sys.stderr'):
            with self.assertRaises(SystemExit):
                cli.parse_args(['bogus'])

    @patch('servemux.servemux.setup_logging')
    @patch('servemux.servemux.start_http_server')
    def test_bind_error_exits_with_failure(self, mock_start, mock_logging):
        mock_start.side_effect = ListenerBindError('0.0.0.0', 8080, 'EADDRINUSE')
        with self.assertLogs('servemux.servemux', level='CRITICAL'):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(['mux'])
        self.assertEqual(ctx.exception.code, 1)

    @patch('servemux.servemux.setup_logging')
    def test_missing_config_exits(self, mock_logging):
        with patch('sys.stderr'):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(['mux', '-c', '/nonexistent/servemux.yaml'])
        self.assertEqual(ctx.exception.code, 1)

    @patch('servemux.servemux.setup_logging')
    @patch('servemux.servemux.listener_loop')
    @patch('servemux.servemux.start_http_server')
    def test_cli_flags_reach_the_listener(self, mock_start, mock_loop, mock_logging):
        httpd = MagicMock()
        mock_start.return_value = httpd
        with patch('servemux.servemux.signal.signal'):
            cli.main(['simple', '--host', '127.0.0.1', '--port', '3005'])

        router = mock_start.call_args.args[0]
        self.assertEqual(router.name, 'simple')
        self.assertEqual(mock_start.call_args.kwargs, {'port': 3005, 'host': '127.0.0.1'})
        controller, served = mock_loop.call_args.args
        self.assertIs(served, httpd)
        self.assertEqual(controller.name, 'simple')


if __name__ == '__main__':
    unittest.main()
