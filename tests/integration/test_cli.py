"""
Integration tests for the i18next-test command line.

These tests write a real locale tree and config file to a temporary
directory and run the CLI entry point against it.
"""
import os
from unittest.mock import patch

import pytest

from i18next_test import __version__
from i18next_test.cli import main


def run_cli(*args):
    with patch.dict(os.environ, {'NO_COLOR': '1'}):
        return main(list(args))


class TestCli:
    """Test suite for the CLI entry point."""

    def test_valid_locale_tree_passes(self, write_locale_tree, capsys):
        paths = write_locale_tree({
            'en/sign-in.json': {'Sign in <0>here</0>': 'Sign in <0>here</0>'},
            'de/sign-in.json': {'Sign in <0>here</0>': 'Hier <0>anmelden</0>'},
        })

        exit_code = run_cli('-c', paths['config_path'])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert '  i18next Test' in output
        assert '  [pass] ' + os.path.join(paths['locale_path'], 'de', 'sign-in.json') in output
        assert '  [pass] ' + os.path.join(paths['locale_path'], 'en', 'sign-in.json') in output
        assert '[fail]' not in output

    def test_invalid_locale_tree_fails(self, write_locale_tree, capsys):
        paths = write_locale_tree({
            'de/sign-in.json': {'Sign in': 'Sign in', 'Sign in {{name}}': 'Anmelden {{user}}'},
            'de/profile.json': '{',
            'en/sign-in.json': {'Sign in': 'Sign in'},
        })

        exit_code = run_cli('-c', paths['config_path'])

        output = capsys.readouterr().out
        assert exit_code == 1
        assert '  [fail] ' + os.path.join(paths['locale_path'], 'de', 'profile.json') in output
        assert '         - File content could not be parsed as locale JSON' in output
        assert '         - "Sign in" has a translation equal to the source language' in output
        assert '         - "Sign in {{name}}" has mismatching interpolation markers in the translation' in output
        assert '           Expected: ["{{name}}"]' in output
        assert '           Received: ["{{user}}"]' in output
        assert '  [pass] ' + os.path.join(paths['locale_path'], 'en', 'sign-in.json') in output

    def test_prohibited_text_from_config(self, write_locale_tree, capsys):
        paths = write_locale_tree(
            {'en/sign-in.json': {'Sign in to the page': 'Log in to the page'}},
            prohibited_text=[{'pattern': '\\blog.?in\\b', 'ignore_case': True}],
        )

        exit_code = run_cli('-c', paths['config_path'])

        output = capsys.readouterr().out
        assert exit_code == 1
        assert '"Sign in to the page" has prohibited text in the translation' in output
        assert 'Prohibited: [Log in] to the page' in output

    def test_default_namespace_and_removed_keys(self, write_locale_tree, capsys):
        paths = write_locale_tree({
            'en/common.json': {'Sign in': 'Sign in'},
            'en/sign-in_old.json': {'Sign up': 'Sign up'},
        })

        exit_code = run_cli('-c', paths['config_path'])

        output = capsys.readouterr().out
        assert exit_code == 1
        assert '"Sign in" is missing an explicit namespace' in output
        assert '"Sign up" is tagged as removed from source code' in output

    @pytest.mark.parametrize('silent_args, silent_config', [(['--silent'], False), ([], True)])
    def test_silent_mode(self, write_locale_tree, capsys, silent_args, silent_config):
        paths = write_locale_tree({
            'en/sign-in.json': {'Sign in': 'Sign in'},
            'de/sign-in.json': {'Sign in': ''},
        }, silent=silent_config)

        exit_code = run_cli('-c', paths['config_path'], *silent_args)

        output = capsys.readouterr().out
        assert exit_code == 1
        assert '[pass]' not in output
        assert '[fail]' in output

    def test_config_file_from_environment(self, write_locale_tree, capsys):
        paths = write_locale_tree({'en/sign-in.json': {'Sign in': 'Sign in'}})

        with patch.dict(os.environ, {'I18NEXT_TEST_CONFIG_FILE': paths['config_path']}):
            exit_code = run_cli()

        assert exit_code == 0
        assert '[pass]' in capsys.readouterr().out

    def test_missing_config_file(self, tmp_path, capsys):
        exit_code = run_cli('-c', os.path.join(str(tmp_path), 'missing.yaml'))

        assert exit_code == 1
        assert 'error: config file does not exist' in capsys.readouterr().err

    def test_invalid_config_file(self, tmp_path, capsys):
        config_path = os.path.join(str(tmp_path), 'i18next-test.config.yaml')
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write('locale_path: locales\n')

        exit_code = run_cli('-c', config_path)

        assert exit_code == 1
        assert 'error: config file is invalid' in capsys.readouterr().err

    def test_missing_locale_path(self, write_locale_tree, tmp_path, capsys):
        paths = write_locale_tree({}, locale_path=os.path.join(str(tmp_path), 'missing'))

        exit_code = run_cli('-c', paths['config_path'])

        assert exit_code == 1
        assert 'error: locale path could not be read' in capsys.readouterr().err

    def test_missing_locale_path_is_logged(self, write_locale_tree, tmp_path):
        log_file_path = os.path.join(str(tmp_path), 'logs', 'i18next-test.log')
        paths = write_locale_tree(
            {},
            locale_path=os.path.join(str(tmp_path), 'missing'),
            logging={'log_level': 'ERROR', 'log_file_path': log_file_path, 'log_to_console': False},
        )

        exit_code = run_cli('-c', paths['config_path'])

        assert exit_code == 1
        with open(log_file_path, 'r', encoding='utf-8') as f:
            assert 'ERROR - locale path could not be read' in f.read()

    def test_unreadable_file_does_not_stop_the_run(self, write_locale_tree, capsys):
        paths = write_locale_tree({'en/sign-in.json': {'Sign in': 'Sign in'}})
        latin1_path = os.path.join(paths['locale_path'], 'de', 'broken.json')
        os.makedirs(os.path.dirname(latin1_path))
        with open(latin1_path, 'wb') as f:
            f.write('{"Grüße": "Grüße"}'.encode('latin-1'))

        exit_code = run_cli('-c', paths['config_path'])

        output = capsys.readouterr().out
        assert exit_code == 1
        assert '  [fail] ' + latin1_path in output
        assert '- File could not be read' in output
        assert '  [pass] ' + os.path.join(paths['locale_path'], 'en', 'sign-in.json') in output

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli('--version')

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out
