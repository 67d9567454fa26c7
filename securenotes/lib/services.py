"""Explicit construction of the service graph used by the CLI and tests."""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from config import settings
from .auth import LockService, PasscodePrompt
from .codec import NoteCodec, now_ms
from .crypto import FieldCipher
from .keystore import KeyStore
from .presenter import NotePresenter
from .secure_storage import FileSecureStorage, SecureStorage
from .storage import NoteStore


@dataclass
class Services:
	storage: SecureStorage
	keystore: KeyStore
	cipher: FieldCipher
	codec: NoteCodec
	store: NoteStore
	presenter: NotePresenter
	lock: LockService

	def close(self) -> None:
		self.store.close()


def build_services(
	db_path: Path | str | None = None,
	storage: Optional[SecureStorage] = None,
	prompt: Optional[PasscodePrompt] = None,
	clock: Callable[[], int] = now_ms,
) -> Services:
	storage = storage if storage is not None else FileSecureStorage(settings.keychain_path())
	lock = LockService(storage, prompt)
	keystore = KeyStore(storage)
	cipher = FieldCipher(keystore)
	codec = NoteCodec(cipher, clock)
	store = NoteStore(db_path if db_path is not None else settings.db_path(), codec, keystore)
	return Services(storage, keystore, cipher, codec, store, NotePresenter(store), lock)
