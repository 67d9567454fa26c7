from click.testing import CliRunner
from scripts.backup import main as backup
from securenotes.cli.commands import cli

def test_backup_copies_database(monkeypatch, tmp_path):
    monkeypatch.setenv('SECURENOTES_HOME', str(tmp_path))
    runner = CliRunner()
    runner.invoke(cli, ['add', '--title', 'T', '--content', 'C'])
    dest = tmp_path / 'backups'
    r = runner.invoke(backup, ['--dest', str(dest)])
    assert r.exit_code == 0
    copies = list(dest.glob('notes_*.db'))
    assert len(copies) == 1
    assert copies[0].read_bytes() == (tmp_path / 'securenotes.db').read_bytes()

def test_backup_without_database(monkeypatch, tmp_path):
    monkeypatch.setenv('SECURENOTES_HOME', str(tmp_path))
    r = CliRunner().invoke(backup, ['--dest', str(tmp_path / 'b')])
    assert r.exit_code == 1
    assert 'nothing to backup' in r.output
