from click.testing import CliRunner
from securenotes.cli.commands import cli

def test_cli_help():
    r = CliRunner().invoke(cli, ['--help'])
    assert r.exit_code == 0
    assert 'add' in r.output and 'list' in r.output

def test_cli_add_list_show(monkeypatch, tmp_path):
    monkeypatch.setenv('SECURENOTES_HOME', str(tmp_path))
    runner = CliRunner()
    add = runner.invoke(cli, ['add'], input='Title\nContent body\n')
    assert add.exit_code == 0
    assert 'Added note 1.' in add.output
    lst = runner.invoke(cli, ['list'])
    assert lst.exit_code == 0
    assert '1: Title' in lst.output
    show = runner.invoke(cli, ['show', '1'])
    assert show.exit_code == 0
    assert 'Content body' in show.output
    assert (tmp_path / 'securenotes.db').exists()
    assert (tmp_path / 'keychain.json').exists()

def test_cli_empty_title_rejected(monkeypatch, tmp_path):
    monkeypatch.setenv('SECURENOTES_HOME', str(tmp_path))
    r = CliRunner().invoke(cli, ['add', '--title', '  ', '--content', 'x'])
    assert r.exit_code != 0
    assert 'Title is required' in r.output

def test_cli_edit_and_delete(monkeypatch, tmp_path):
    monkeypatch.setenv('SECURENOTES_HOME', str(tmp_path))
    runner = CliRunner()
    runner.invoke(cli, ['add', '--title', 'Old', '--content', 'x'])
    ed = runner.invoke(cli, ['edit', '1', '--title', 'New', '--content', 'y'])
    assert ed.exit_code == 0
    assert 'Updated note 1.' in ed.output
    assert 'New' in runner.invoke(cli, ['show', '1']).output
    missing = runner.invoke(cli, ['edit', '99', '--title', 'A', '--content', 'b'])
    assert missing.exit_code == 1
    assert 'Not found' in missing.output
    d1 = runner.invoke(cli, ['delete', '1'])
    d2 = runner.invoke(cli, ['delete', '1'])
    assert d1.exit_code == 0 and d2.exit_code == 0
    gone = runner.invoke(cli, ['show', '1'])
    assert gone.exit_code == 1
    assert 'Not found' in gone.output
    assert 'No notes.' in runner.invoke(cli, ['list']).output

def test_cli_reset(monkeypatch, tmp_path):
    monkeypatch.setenv('SECURENOTES_HOME', str(tmp_path))
    runner = CliRunner()
    runner.invoke(cli, ['add', '--title', 'T', '--content', 'C'])
    r = runner.invoke(cli, ['reset', '--yes'])
    assert r.exit_code == 0
    assert 'No notes.' in runner.invoke(cli, ['list']).output

def test_cli_lock_gates_access(monkeypatch, tmp_path):
    monkeypatch.setenv('SECURENOTES_HOME', str(tmp_path))
    runner = CliRunner()
    en = runner.invoke(cli, ['lock', 'enable'], input='1234\n1234\n')
    assert en.exit_code == 0
    assert 'Lock enabled.' in runner.invoke(cli, ['lock', 'status']).output
    ok = runner.invoke(cli, ['list'], input='1234\n')
    assert ok.exit_code == 0
    bad = runner.invoke(cli, ['list'], input='0000\n')
    assert bad.exit_code == 1
    assert 'authentication failed' in bad.output
    dis = runner.invoke(cli, ['lock', 'disable'], input='1234\n')
    assert dis.exit_code == 0
    assert runner.invoke(cli, ['list']).exit_code == 0
