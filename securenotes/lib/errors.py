"""Exception taxonomy shared by the storage, crypto and presenter layers."""
from __future__ import annotations


class SecureNotesError(Exception):
	"""Base class for every error the core raises."""


class StorageError(SecureNotesError):
	pass


class StorageUnavailable(StorageError):
	"""Secure storage or the notes table could not be reached."""


class CryptoError(SecureNotesError):
	pass


class InvalidIv(CryptoError):
	pass


class DecryptionFailed(CryptoError):
	pass


class CipherUnavailable(CryptoError):
	"""The crypto backend cannot provide AES-256-CBC."""


class DecodeFailed(SecureNotesError):
	"""A stored record could not be turned back into a note."""

	def __init__(self, message: str, record_id: int | None = None):
		super().__init__(message)
		self.record_id = record_id


class AuthenticationFailed(SecureNotesError):
	pass
