"""Encrypted note persistence on top of SQLite."""
from __future__ import annotations
import sqlite3, logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from config.settings import TABLE_NAME
from .codec import EncryptedNoteRecord, Note, NoteCodec, Saved, Unsaved
from .errors import DecodeFailed, StorageUnavailable
from .keystore import KeyStore

log = logging.getLogger(__name__)

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    titleEncrypted TEXT NOT NULL,
    titleIv TEXT NOT NULL,
    contentEncrypted TEXT NOT NULL,
    contentIv TEXT NOT NULL,
    createdAt INTEGER NOT NULL,
    updatedAt INTEGER NOT NULL
)
"""

INSERT_SQL = f"""
INSERT INTO {TABLE_NAME} (titleEncrypted, titleIv, contentEncrypted, contentIv, createdAt, updatedAt)
VALUES (?, ?, ?, ?, ?, ?)
"""

# updatedAt never moves backwards or stands still, even within one millisecond.
UPDATE_SQL = f"""
UPDATE {TABLE_NAME}
   SET titleEncrypted = ?, titleIv = ?, contentEncrypted = ?, contentIv = ?,
       updatedAt = MAX(?, updatedAt + 1)
 WHERE id = ?
"""

SELECT_ONE_SQL = f"SELECT * FROM {TABLE_NAME} WHERE id = ?"
SELECT_ALL_SQL = f"SELECT * FROM {TABLE_NAME} ORDER BY updatedAt DESC, id DESC"
DELETE_SQL = f"DELETE FROM {TABLE_NAME} WHERE id = ?"
DROP_SQL = f"DROP TABLE IF EXISTS {TABLE_NAME}"


def _row_to_record(row: sqlite3.Row) -> EncryptedNoteRecord:
	return EncryptedNoteRecord(
		id=row['id'],
		title_encrypted=row['titleEncrypted'],
		title_iv=row['titleIv'],
		content_encrypted=row['contentEncrypted'],
		content_iv=row['contentIv'],
		created_at=row['createdAt'],
		updated_at=row['updatedAt'],
	)


class NoteStore:
	"""CRUD over the ``notes`` table; plaintext never reaches the database.

	The connection is opened on first use (or explicitly via :meth:`open`) and
	released by :meth:`close`; later calls reopen it. Usable as a context
	manager to guarantee the release.
	"""

	def __init__(self, path: Path | str, codec: NoteCodec, keystore: KeyStore):
		self.path = path
		self.codec = codec
		self.keystore = keystore
		self._connection: Optional[sqlite3.Connection] = None

	def __enter__(self) -> 'NoteStore':
		self.open()
		return self

	def __exit__(self, *exc) -> None:
		self.close()

	@property
	def is_open(self) -> bool:
		return self._connection is not None

	def open(self) -> sqlite3.Connection:
		if self._connection is not None:
			return self._connection
		log.info("Opening notes database at %s", self.path)
		try:
			if self.path != ':memory:':
				Path(self.path).parent.mkdir(parents=True, exist_ok=True)
			conn = sqlite3.connect(str(self.path))
			conn.row_factory = sqlite3.Row
			conn.execute(SCHEMA_SQL)
			conn.commit()
		except (sqlite3.Error, OSError) as e:
			log.error("Failed to open notes database: %s", e)
			raise StorageUnavailable(f'Failed to initialize database: {e}') from e
		self._connection = conn
		return conn

	ensure_open = open

	def close(self) -> None:
		if self._connection is not None:
			log.info("Closing notes database")
			self._connection.close()
			self._connection = None

	@contextmanager
	def _cursor(self) -> Iterator[sqlite3.Cursor]:
		conn = self.ensure_open()
		cur = conn.cursor()
		try:
			yield cur
			conn.commit()
		except sqlite3.Error as e:
			conn.rollback()
			raise StorageUnavailable(f'Database operation failed: {e}') from e
		except Exception:
			conn.rollback()
			raise
		finally:
			cur.close()

	def save(self, note: Note) -> int:
		record = self.codec.to_record(note)
		identity = note.identity
		with self._cursor() as cur:
			if isinstance(identity, Saved):
				cur.execute(UPDATE_SQL, (
					record.title_encrypted, record.title_iv,
					record.content_encrypted, record.content_iv,
					record.updated_at, identity.id,
				))
				if cur.rowcount == 0:
					log.warning("Update for note %s matched no row", identity.id)
				return identity.id
			elif isinstance(identity, Unsaved):
				cur.execute(INSERT_SQL, (
					record.title_encrypted, record.title_iv,
					record.content_encrypted, record.content_iv,
					record.created_at, record.updated_at,
				))
				return cur.lastrowid
			raise TypeError(f'Unknown note identity: {identity!r}')

	def get(self, note_id: int) -> Optional[Note]:
		with self._cursor() as cur:
			cur.execute(SELECT_ONE_SQL, (note_id,))
			row = cur.fetchone()
		if row is None:
			return None
		return self.codec.to_note(_row_to_record(row))

	def list(self) -> List[Note]:
		with self._cursor() as cur:
			cur.execute(SELECT_ALL_SQL)
			rows = cur.fetchall()
		notes: List[Note] = []
		for row in rows:
			try:
				notes.append(self.codec.to_note(_row_to_record(row)))
			except DecodeFailed as e:
				log.warning("Skipping undecryptable note %s: %s", e.record_id, e)
		return notes

	def delete(self, note_id: int) -> None:
		with self._cursor() as cur:
			cur.execute(DELETE_SQL, (note_id,))

	def reset(self) -> None:
		"""Drop every note and the encryption key. Irreversible."""
		self.keystore.reset()
		with self._cursor() as cur:
			cur.execute(DROP_SQL)
			cur.execute(SCHEMA_SQL)
		log.warning("Notes database has been reset")
