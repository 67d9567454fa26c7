"""CLI commands implemented with click.

The CLI is the view: each note command hands a ``ClickNoteView`` to the
presenter and prints whatever it is told.
"""
from __future__ import annotations
from datetime import datetime
from typing import List
import click
from securenotes.lib.codec import Note
from securenotes.lib.errors import SecureNotesError
from securenotes.lib.logger import configure_logging, reset_logging
from securenotes.lib.services import Services, build_services


def _prompt_passcode(message: str) -> str:
	return click.prompt(message, hide_input=True, default='', show_default=False)


def _fmt(ms: int | None) -> str:
	if ms is None:
		return '-'
	return datetime.fromtimestamp(ms / 1000).strftime('%Y-%m-%d %H:%M:%S')


class ClickNoteView:
	def __init__(self):
		self.failed = False

	def on_notes_loaded(self, notes: List[Note]) -> None:
		if not notes:
			click.echo('No notes.')
		for n in notes:
			click.echo(f"{n.id}: {n.title} (updated {_fmt(n.updated_at)})")

	def on_note_added(self, note: Note) -> None:
		click.echo(f'Added note {note.id}.')

	def on_note_updated(self, note: Note) -> None:
		click.echo(f'Updated note {note.id}.')

	def on_note_deleted(self, note_id: int) -> None:
		click.echo(f'Deleted note {note_id}.')

	def on_error(self, error: Exception) -> None:
		click.echo(f'Error: {error}', err=True)
		self.failed = True


def _run(ctx: click.Context, action) -> None:
	"""Attach a fresh view, run ``action(presenter)`` and exit 1 on failure."""
	services: Services = ctx.obj
	view = ClickNoteView()
	services.presenter.set_view(view)
	try:
		action(services.presenter)
	finally:
		services.presenter.remove_view()
	if view.failed:
		ctx.exit(1)


def _require_title(title: str) -> None:
	if not title.strip():
		raise click.UsageError('Title is required')


@click.group()
@click.pass_context
def cli(ctx):
	"""securenotes - encrypted notes"""
	configure_logging()
	ctx.call_on_close(reset_logging)
	services = build_services(prompt=_prompt_passcode)
	ctx.obj = services
	ctx.call_on_close(services.close)
	if ctx.invoked_subcommand != 'lock' and not services.lock.authenticate():
		click.echo('Error: authentication failed', err=True)
		ctx.exit(1)


@cli.command()
@click.option('--title', prompt=True)
@click.option('--content', prompt=True, default='', show_default=False)
@click.pass_context
def add(ctx, title, content):
	"""Create a new encrypted note."""
	_require_title(title)
	_run(ctx, lambda p: p.add_note(title, content))


@cli.command('list')
@click.pass_context
def list_notes(ctx):
	"""List notes, most recently modified first."""
	_run(ctx, lambda p: p.load_notes())


@cli.command()
@click.argument('note_id', type=int)
@click.pass_context
def show(ctx, note_id):
	"""Show full content of a note by ID."""
	services: Services = ctx.obj
	try:
		note = services.store.get(note_id)
	except SecureNotesError as e:
		click.echo(f'Error: {e}', err=True)
		ctx.exit(1)
	if note is None:
		click.echo('Not found')
		ctx.exit(1)
	click.echo(f"ID: {note.id}\nTitle: {note.title}\nCreated: {_fmt(note.created_at)}\nModified: {_fmt(note.updated_at)}\n---\n{note.content}")


@cli.command()
@click.argument('note_id', type=int)
@click.option('--title', prompt=True)
@click.option('--content', prompt=True, default='', show_default=False)
@click.pass_context
def edit(ctx, note_id, title, content):
	"""Replace the title and content of a note."""
	_require_title(title)
	services: Services = ctx.obj
	view = ClickNoteView()
	services.presenter.set_view(view)
	try:
		note = services.presenter.update_note(note_id, title, content)
	finally:
		services.presenter.remove_view()
	if view.failed:
		ctx.exit(1)
	if note is None:
		click.echo('Not found')
		ctx.exit(1)


@cli.command()
@click.argument('note_id', type=int)
@click.pass_context
def delete(ctx, note_id):
	"""Delete a note (deleting a missing note is not an error)."""
	_run(ctx, lambda p: p.delete_note(note_id))


@cli.command()
@click.confirmation_option(prompt='This deletes every note and the encryption key. Continue?')
@click.pass_context
def reset(ctx):
	"""Wipe all notes and the encryption key (development recovery)."""
	services: Services = ctx.obj
	try:
		services.store.reset()
	except SecureNotesError as e:
		click.echo(f'Error: {e}', err=True)
		ctx.exit(1)
	click.echo('Database has been reset.')


# --- App lock ---

@cli.group()
def lock():
	"""Manage the passcode lock."""


@lock.command('status')
@click.pass_context
def lock_status(ctx):
	services: Services = ctx.obj
	click.echo('Lock enabled.' if services.lock.is_enabled() else 'Lock disabled.')


@lock.command('enable')
@click.option('--passcode', prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_context
def lock_enable(ctx, passcode):
	"""Require a passcode before notes can be accessed."""
	services: Services = ctx.obj
	if services.lock.is_enabled() and not services.lock.authenticate('Current passcode'):
		click.echo('Error: authentication failed', err=True)
		ctx.exit(1)
	try:
		services.lock.enable(passcode)
	except SecureNotesError as e:
		click.echo(f'Error: {e}', err=True)
		ctx.exit(1)
	click.echo('Lock enabled.')


@lock.command('disable')
@click.pass_context
def lock_disable(ctx):
	services: Services = ctx.obj
	if not services.lock.is_enabled():
		click.echo('Lock already disabled.')
		return
	if not services.lock.authenticate('Passcode'):
		click.echo('Error: authentication failed', err=True)
		ctx.exit(1)
	services.lock.disable()
	click.echo('Lock disabled.')
