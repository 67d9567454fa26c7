"""Installation-wide encryption key, kept in secure storage."""
from __future__ import annotations
import secrets, logging
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.backends import default_backend

from config.settings import (
	KEY_LENGTH, SALT_LENGTH, PBKDF2_ITERATIONS, KEYCHAIN_SERVICE, KEYCHAIN_ACCOUNT, SALT_ACCOUNT
)
from .errors import StorageUnavailable
from .secure_storage import SecureStorage

log = logging.getLogger(__name__)


class KeyStore:
	"""Creates the key on first use and hands back the stored copy afterwards.

	The key is 32 random bytes stretched through PBKDF2-HMAC-SHA512 with a
	salt that is itself kept in secure storage. ``reset()`` removes both, after
	which every previously encrypted field is unreadable.
	"""

	def __init__(self, storage: SecureStorage, iterations: int = PBKDF2_ITERATIONS):
		self.storage = storage
		self.iterations = iterations
		self._backend = default_backend()

	def get_key(self) -> bytes:
		stored = self._get(KEYCHAIN_ACCOUNT)
		if stored is not None:
			return self._decode(stored, KEY_LENGTH, 'encryption key')
		salt = self._get_salt()
		seed = secrets.token_bytes(KEY_LENGTH)
		kdf = PBKDF2HMAC(algorithm=hashes.SHA512(), length=KEY_LENGTH, salt=salt, iterations=self.iterations, backend=self._backend)
		key = kdf.derive(seed)
		self._set(KEYCHAIN_ACCOUNT, key.hex())
		log.info("Generated new encryption key")
		return key

	def reset(self) -> None:
		try:
			self.storage.delete(KEYCHAIN_SERVICE, KEYCHAIN_ACCOUNT)
			self.storage.delete(KEYCHAIN_SERVICE, SALT_ACCOUNT)
		except OSError as e:
			raise StorageUnavailable(f'Failed to reset encryption key: {e}') from e
		log.warning("Encryption key reset; existing notes are no longer readable")

	def _get_salt(self) -> bytes:
		stored = self._get(SALT_ACCOUNT)
		if stored is not None:
			return self._decode(stored, SALT_LENGTH, 'salt')
		salt = secrets.token_bytes(SALT_LENGTH)
		self._set(SALT_ACCOUNT, salt.hex())
		return salt

	def _get(self, account: str) -> str | None:
		try:
			return self.storage.get(KEYCHAIN_SERVICE, account)
		except OSError as e:
			raise StorageUnavailable(f'Secure storage unavailable: {e}') from e

	def _set(self, account: str, value: str) -> None:
		try:
			self.storage.set(KEYCHAIN_SERVICE, account, value)
		except OSError as e:
			raise StorageUnavailable(f'Secure storage unavailable: {e}') from e

	@staticmethod
	def _decode(value: str, length: int, what: str) -> bytes:
		try:
			raw = bytes.fromhex(value)
		except ValueError as e:
			raise StorageUnavailable(f'Stored {what} is not valid hex') from e
		if len(raw) != length:
			raise StorageUnavailable(f'Stored {what} has bad length')
		return raw
