"""Plaintext notes and their encrypted row representation."""
from __future__ import annotations
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .crypto import FieldCipher
from .errors import CryptoError, DecodeFailed


@dataclass(frozen=True)
class Unsaved:
	pass


@dataclass(frozen=True)
class Saved:
	id: int


NoteIdentity = Union[Unsaved, Saved]
UNSAVED = Unsaved()


def now_ms() -> int:
	return time.time_ns() // 1_000_000


@dataclass
class Note:
	title: str
	content: str = ''
	identity: NoteIdentity = field(default=UNSAVED)
	created_at: Optional[int] = None
	updated_at: Optional[int] = None

	@property
	def id(self) -> Optional[int]:
		return self.identity.id if isinstance(self.identity, Saved) else None


@dataclass
class EncryptedNoteRecord:
	title_encrypted: str
	title_iv: str
	content_encrypted: str
	content_iv: str
	created_at: int
	updated_at: int
	id: Optional[int] = None


class NoteCodec:
	def __init__(self, cipher: FieldCipher, clock: Callable[[], int] = now_ms):
		self.cipher = cipher
		self.clock = clock

	def to_record(self, note: Note) -> EncryptedNoteRecord:
		"""Encrypt title and content under independent IVs; stamp ``updated_at``."""
		now = self.clock()
		title_ct, title_iv = self.cipher.encrypt_field(note.title)
		content_ct, content_iv = self.cipher.encrypt_field(note.content)
		return EncryptedNoteRecord(
			title_encrypted=title_ct,
			title_iv=title_iv,
			content_encrypted=content_ct,
			content_iv=content_iv,
			created_at=note.created_at if note.created_at is not None else now,
			updated_at=now,
			id=note.id,
		)

	def to_note(self, record: EncryptedNoteRecord) -> Note:
		try:
			title = self.cipher.decrypt_field(record.title_encrypted, record.title_iv)
			content = self.cipher.decrypt_field(record.content_encrypted, record.content_iv)
		except CryptoError as e:
			raise DecodeFailed(f'Note {record.id} could not be decrypted: {e}', record.id) from e
		return Note(
			title=title,
			content=content,
			identity=Saved(record.id) if record.id is not None else UNSAVED,
			created_at=record.created_at,
			updated_at=record.updated_at,
		)
