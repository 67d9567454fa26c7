"""Relays note store results to a single registered view."""
from __future__ import annotations
import logging
from typing import List, Optional, Protocol

from .codec import Note, Saved
from .errors import SecureNotesError
from .storage import NoteStore

log = logging.getLogger(__name__)


class NoteView(Protocol):
	def on_notes_loaded(self, notes: List[Note]) -> None: ...
	def on_note_added(self, note: Note) -> None: ...
	def on_note_updated(self, note: Note) -> None: ...
	def on_note_deleted(self, note_id: int) -> None: ...
	def on_error(self, error: Exception) -> None: ...


class NotePresenter:
	def __init__(self, store: NoteStore):
		self.store = store
		self.view: Optional[NoteView] = None

	def set_view(self, view: NoteView) -> None:
		"""Register ``view``, replacing any previous one."""
		self.view = view

	def remove_view(self) -> None:
		self.view = None

	def load_notes(self) -> Optional[List[Note]]:
		try:
			notes = self.store.list()
		except SecureNotesError as e:
			self._handle_error(e)
			return None
		if self.view:
			self.view.on_notes_loaded(notes)
		return notes

	def add_note(self, title: str, content: str) -> Optional[Note]:
		try:
			note_id = self.store.save(Note(title=title, content=content))
			note = self.store.get(note_id)
		except SecureNotesError as e:
			self._handle_error(e)
			return None
		if note and self.view:
			self.view.on_note_added(note)
		return note

	def update_note(self, note_id: int, title: str, content: str) -> Optional[Note]:
		try:
			self.store.save(Note(title=title, content=content, identity=Saved(note_id)))
			note = self.store.get(note_id)
		except SecureNotesError as e:
			self._handle_error(e)
			return None
		if note and self.view:
			self.view.on_note_updated(note)
		return note

	def delete_note(self, note_id: int) -> Optional[int]:
		try:
			self.store.delete(note_id)
		except SecureNotesError as e:
			self._handle_error(e)
			return None
		if self.view:
			self.view.on_note_deleted(note_id)
		return note_id

	def _handle_error(self, error: SecureNotesError) -> None:
		log.error("Note operation failed: %s", error)
		if self.view:
			self.view.on_error(error)
