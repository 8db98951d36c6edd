import json
import builtins
from pathlib import Path
from unittest.mock import patch

import pytest

from cli import main, load_intent, save_intent, parse_now
from models import ProfileIntent
from ingest.github import GitHubUserNotFound


FACTS = [
    {'name': 'kernel', 'description': 'An OS kernel', 'language': 'C', 'stargazers_count': 90,
     'updated_at': '2025-05-20T00:00:00Z', 'fork': False, 'archived': False, 'size': 900},
    {'name': 'git', 'description': None, 'language': 'C', 'stargazers_count': 40,
     'updated_at': '2025-05-10T00:00:00Z', 'fork': False, 'archived': False, 'size': 500},
    {'name': 'diving', 'description': 'Dive log', 'language': 'C++', 'stargazers_count': 6,
     'updated_at': '2024-01-10T00:00:00Z', 'fork': False, 'archived': False, 'size': 80},
    {'name': 'upstream-fork', 'language': 'Go', 'stargazers_count': 999,
     'updated_at': '2025-05-10T00:00:00Z', 'fork': True, 'archived': False, 'size': 10},
]

INTENT = {
    'name': 'Linus',
    'role': 'Kernel maintainer',
    'careerStage': 'professional',
    'techStack': ['C'],
    'profileGoal': 'branding',
    'tone': 'confident',
    'sections': {'projects': False},
}


@pytest.fixture
def files(tmp_path):
    facts = tmp_path / 'facts.json'
    facts.write_text(json.dumps(FACTS), encoding='utf-8')
    intent = tmp_path / 'intent.json'
    intent.write_text(json.dumps(INTENT), encoding='utf-8')
    return facts, intent


def _base(facts, intent):
    return ['--facts-file', str(facts), '--intent', str(intent), '--now', '2025-06-01T00:00:00Z']


def _item_number(facts, intent, capsys, message):
    assert main(_base(facts, intent)) == 0
    out = capsys.readouterr().out
    for line in out.splitlines():
        if message in line:
            return int(line.split('[', 1)[1].split(']', 1)[0])
    raise AssertionError(f"{message!r} not in report:\n{out}")


def test_text_report_to_stdout(files, capsys):
    facts, intent = files
    assert main(_base(facts, intent)) == 0
    out = capsys.readouterr().out
    assert 'Repositories: 3' in out
    assert 'We recommend featuring these repositories: kernel, git, diving' in out
    assert 'Consider enabling the Featured Projects section' in out


@pytest.mark.parametrize('fmt,marker', [('md', '# Profile Advice'), ('html', '<title>Profile Advice</title>'), ('json', '"recommendations"')])
def test_report_formats_to_file(files, tmp_path, fmt, marker):
    facts, intent = files
    out_file = tmp_path / 'reports' / f"advice.{fmt}"
    assert main(_base(facts, intent) + ['--output', fmt, '--out-file', str(out_file)]) == 0
    assert marker in Path(out_file).read_text(encoding='utf-8')


def test_apply_with_force_writes_intent_out(files, tmp_path, capsys):
    facts, intent = files
    number = _item_number(facts, intent, capsys, 'Consider enabling the Featured Projects section')
    intent_out = tmp_path / 'updated.yaml'
    argv = _base(facts, intent) + ['--apply', str(number), '--force', '--intent-out', str(intent_out)]
    assert main(argv) == 0
    assert 'Updated profile intent written to' in capsys.readouterr().out
    updated = load_intent(str(intent_out))
    assert updated.sections['projects'] is True
    # the source intent file is untouched
    assert json.loads(intent.read_text(encoding='utf-8')) == INTENT


def test_apply_confirmed_overwrites_intent(files, capsys):
    facts, intent = files
    number = _item_number(facts, intent, capsys, 'Primary languages detected')
    with patch.object(builtins, 'input', return_value='y'):
        assert main(_base(facts, intent) + ['--apply', str(number)]) == 0
    assert load_intent(str(intent)).tech_stack == ['C', 'C++']


def test_apply_declined_leaves_intent(files, capsys):
    facts, intent = files
    number = _item_number(facts, intent, capsys, 'Primary languages detected')
    with patch.object(builtins, 'input', return_value='n'):
        assert main(_base(facts, intent) + ['--apply', str(number)]) == 0
    assert 'Aborted; profile intent unchanged.' in capsys.readouterr().out
    assert json.loads(intent.read_text(encoding='utf-8')) == INTENT


def test_apply_rejects_informational_and_out_of_range(files, capsys):
    facts, intent = files
    intent.write_text(json.dumps(dict(INTENT, role='')), encoding='utf-8')
    number = _item_number(facts, intent, capsys, 'Your primary role is not specified')
    assert main(_base(facts, intent) + ['--apply', str(number), '--force']) == 1
    assert 'informational' in capsys.readouterr().err
    assert main(_base(facts, intent) + ['--apply', '999', '--force']) == 1
    assert 'No advisory item #999' in capsys.readouterr().err


def test_apply_requires_intent_destination(files):
    facts, _ = files
    with pytest.raises(SystemExit):
        main(['--facts-file', str(facts), '--apply', '1'])


def test_invalid_intent_is_a_usage_error(tmp_path, files):
    facts, _ = files
    bad = tmp_path / 'bad.json'
    bad.write_text(json.dumps({'tone': 'sarcastic'}), encoding='utf-8')
    with pytest.raises(SystemExit):
        main(['--facts-file', str(facts), '--intent', str(bad)])


def test_missing_thresholds_file(files):
    facts, intent = files
    with pytest.raises(SystemExit):
        main(_base(facts, intent) + ['--thresholds', '/nonexistent/thresholds.yaml'])


def test_intent_only_run(capsys):
    assert main(['--now', '2025-06-01']) == 0
    out = capsys.readouterr().out
    assert 'No repository facts were consulted.' in out
    assert 'Remember to add your real name' in out


def test_github_errors_exit_nonzero(capsys):
    with patch('cli.GitHubClient.fetch_public_repos', side_effect=GitHubUserNotFound('GitHub user "ghost" not found', status=404)):
        assert main(['--user', 'ghost']) == 1
    assert 'GitHub user "ghost" not found' in capsys.readouterr().err


def test_intent_yaml_round_trip(tmp_path):
    intent = ProfileIntent(name='Ada', tech_stack=['Python'], sections={'connect': False})
    path = tmp_path / 'intent.yml'
    save_intent(intent, str(path))
    assert load_intent(str(path)) == intent


def test_parse_now():
    assert parse_now('2025-06-01T00:00:00Z').isoformat() == '2025-06-01T00:00:00+00:00'
    with pytest.raises(ValueError):
        parse_now('tomorrow')


def test_apply_with_closed_stdin_declines(files, capsys):
    facts, intent = files
    number = _item_number(facts, intent, capsys, 'Primary languages detected')
    with patch.object(builtins, 'input', side_effect=EOFError):
        assert main(_base(facts, intent) + ['--apply', str(number)]) == 0
    assert 'Aborted; profile intent unchanged.' in capsys.readouterr().out
    assert json.loads(intent.read_text(encoding='utf-8')) == INTENT
