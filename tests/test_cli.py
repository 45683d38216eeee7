import json
import os
import sys

import pytest

from archscan import cli

SAMPLE_APPS = os.path.join(os.path.dirname(__file__), 'fixtures', 'sample_apps')


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, 'argv', ['archscan', *args])
    monkeypatch.setenv('COLUMNS', '200')
    cli.main()


def test_scan_annotations_as_json(monkeypatch, capsys):
    run_cli(monkeypatch, 'scan', SAMPLE_APPS, '--scope', 'myapp', '--raw-json', '--container', 'Web')

    data = json.loads(capsys.readouterr().out)
    assert data['name'] == 'Web'
    components = {c['name']: c for c in data['components']}
    assert set(components) == {'MyController', 'MyRepository'}
    assert [r['destination'] for r in components['MyController']['relationships']] == [
        'myapp.data.repository.MyRepository',
    ]
    assert len(components['MyRepository']['code']) == 2


def test_scan_with_supporting_strategies(monkeypatch, capsys):
    run_cli(monkeypatch, 'scan', SAMPLE_APPS, '--scope', 'myapp', '--raw-json',
            '--supporting', 'first-implementation', '--supporting', 'referenced')

    data = json.loads(capsys.readouterr().out)
    components = {c['name']: c for c in data['components']}
    assert len(components['MyController']['code']) == 2
    assert len(components['MyRepository']['code']) == 4


def test_scan_with_suffixes_runs_one_finder_per_suffix(monkeypatch, capsys):
    run_cli(monkeypatch, 'scan', SAMPLE_APPS, '--scope', 'multiple_finders', '--raw-json',
            '--suffix', 'Repository', '--suffix', 'Controller')

    data = json.loads(capsys.readouterr().out)
    assert [c['name'] for c in data['components']] == ['MyRepository', 'MyController']
    assert data['components'][1]['relationships'][0]['destination'] == 'multiple_finders.package2.repository.MyRepository'


def test_scan_with_exclusions(monkeypatch, capsys):
    run_cli(monkeypatch, 'scan', SAMPLE_APPS, '--scope', 'cyclic', '--raw-json',
            '--suffix', 'Component', '--exclude', r'.*\.BComponent')

    data = json.loads(capsys.readouterr().out)
    assert [c['name'] for c in data['components']] == ['AComponent']
    assert data['components'][0]['relationships'] == []


def test_scan_prints_tables(monkeypatch, capsys):
    run_cli(monkeypatch, 'scan', SAMPLE_APPS, '--scope', 'inherited', '--suffix', 'Component')

    out = capsys.readouterr().out
    assert 'SomeComponent' in out
    assert 'LoggingComponent' in out
    assert 'Relationships' in out


def test_scan_missing_root_exits(monkeypatch, capsys, tmp_path):
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, 'scan', str(tmp_path / 'missing'))

    assert exc.value.code == 1
    assert 'Source root not found' in capsys.readouterr().out


def test_scan_invalid_exclusion_exits(monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, 'scan', SAMPLE_APPS, '--suffix', 'Component', '--exclude', '(')

    assert exc.value.code == 1
    assert 'Scan failed' in capsys.readouterr().out


def test_no_command_prints_help(monkeypatch, capsys):
    run_cli(monkeypatch)

    assert 'usage' in capsys.readouterr().out
