"""Copy the encrypted notes database to a timestamped backup.

The copy is only readable with the encryption key still held in secure
storage; a key reset makes every backup unreadable too.

Usage (from repo root):
  python -m scripts.backup --dest backups/
"""
from __future__ import annotations
import shutil
from datetime import datetime
from pathlib import Path
import click
from config import settings

@click.command()
@click.option('--dest', type=click.Path(file_okay=False, path_type=Path), default=Path('backups'), help='Destination directory for backups.')
def main(dest: Path):
	db_path = settings.db_path()
	if not db_path.exists():
		click.echo(f"No notes database at {db_path}; nothing to backup.")
		raise SystemExit(1)
	dest.mkdir(parents=True, exist_ok=True)
	stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
	target = dest / f"notes_{stamp}.db"
	shutil.copy2(db_path, target)
	click.echo(f"Backup written: {target}")

if __name__ == '__main__':  # pragma: no cover
	main()
