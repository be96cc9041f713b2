# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the command-line front end."""

import io
import json

import pytest

from debugconfigs.cli import main


@pytest.fixture
def run(tmp_path, monkeypatch):
    """Run the CLI against a state file in tmp_path, returning (code, stdout)."""
    monkeypatch.delenv('DEBUGCONFIGS_STATE_FILE', raising=False)
    monkeypatch.delenv('DEBUGCONFIGS_LOG_LEVEL', raising=False)
    monkeypatch.delenv('DEBUGCONFIGS_LOG_FILE', raising=False)
    state_file = tmp_path / 'state.json'

    def _run(*argv):
        out = io.StringIO()
        code = main(['--state', str(state_file), *argv], out=out)
        return code, out.getvalue()

    return _run


@pytest.fixture
def populated(run):
    run('add-root', 'Environment')
    run('add-child', 'environment', 'Development')
    run('add-child', 'environment.development', 'port', '--value', '3000')
    run('add-child', 'environment.development', 'host', '--value', 'localhost')
    return run


class TestCli:
    """Tests for the debugconfigs command."""

    def test_resolve(self, populated):
        assert populated('resolve', 'Environment.Development.Port') == (0, '3000\n')

    def test_show(self, populated):
        code, out = populated('show')
        assert code == 0
        assert out.splitlines() == [
            '+ Environment',
            '  + Development',
            '    - port = 3000',
            '    - host = localhost',
        ]

    def test_set_and_remove(self, populated):
        assert populated('set', 'environment.development.port', '8080')[0] == 0
        assert populated('resolve', 'environment.development.port')[1] == '8080\n'
        assert populated('remove', 'environment.development.host')[0] == 0
        assert populated('resolve', 'environment.development.host')[0] == 1

    def test_set_on_parent_fails(self, populated, capsys):
        code, _ = populated('set', 'environment', 'x')
        assert code == 1
        assert 'has children' in capsys.readouterr().err

    def test_invalid_label(self, run, capsys):
        code, _ = run('add-root', 'a.b')
        assert code == 1
        assert 'cannot contain dots' in capsys.readouterr().err
        assert run('show') == (0, '')

    def test_missing_path(self, populated, capsys):
        code, _ = populated('resolve', 'environment.staging.port')
        assert code == 1
        assert 'does not exist' in capsys.readouterr().err

    def test_generate(self, populated):
        code, out = populated('generate', '--format', 'json')
        assert code == 0
        assert [c['id'] for c in json.loads(out)] == [
            'Environment.Development.port',
            'Environment.Development.host',
        ]
        code, out = populated('generate')
        assert '// use this: ${input:Environment.Development.port}' in out

    def test_export_import(self, populated, tmp_path):
        target = tmp_path / 'out' / 'tree.json'
        assert populated('export', str(target))[0] == 0
        assert json.loads(target.read_text())['version'] == '1.0'
        populated('clear')
        assert populated('show') == (0, '')
        assert populated('import', str(target))[0] == 0
        assert populated('resolve', 'environment.development.host')[1] == 'localhost\n'

    def test_add_inputs(self, populated, tmp_path):
        launch = tmp_path / 'launch.json'
        launch.write_text(json.dumps({
            'version': '0.2.0',
            'inputs': [{'id': 'Environment.Development.port'}],
        }))
        code, out = populated('add-inputs', str(launch))
        assert code == 0
        assert 'Environment.Development.host' in out
        assert 'Environment.Development.port}' not in out

        assert populated('add-inputs', str(launch), '--write')[0] == 0
        ids = [i['id'] for i in json.loads(launch.read_text())['inputs']]
        assert ids == ['Environment.Development.port', 'Environment.Development.host']

        code, out = populated('add-inputs', str(launch))
        assert 'already exist' in out

    def test_bad_config_file(self, run, tmp_path, capsys):
        out = io.StringIO()
        code = main(['--config', str(tmp_path / 'missing.yaml'), 'show'], out=out)
        assert code == 1
        assert 'not found' in capsys.readouterr().err
