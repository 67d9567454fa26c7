"""App lock: a bcrypt-hashed passcode gating entry to the notes.

Plays the part of the phone's biometric gate. Enabling the lock writes a
marker entry with ``requires_auth=True``; reading it back makes the secure
storage call :meth:`LockService.verify_passcode`, which prompts for the
passcode. Encryption never depends on the lock.
"""
from __future__ import annotations
import logging
from typing import Callable, Optional
import bcrypt

from config.settings import LOCK_SERVICE, LOCK_ACCOUNT, PASSCODE_ACCOUNT
from .errors import AuthenticationFailed, SecureNotesError
from .secure_storage import SecureStorage

log = logging.getLogger(__name__)

PasscodePrompt = Callable[[str], str]
_MARKER = 'lockEnabled'


def hash_password(password: str) -> str:
	if not password:
		raise AuthenticationFailed('Empty passcode')
	return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
	try:
		return bcrypt.checkpw(password.encode(), hashed.encode())
	except ValueError:
		return False


class LockService:
	def __init__(self, storage: SecureStorage, prompt: Optional[PasscodePrompt] = None):
		self.storage = storage
		self.prompt = prompt
		storage.authenticator = self.verify_passcode

	def is_available(self) -> bool:
		return self.prompt is not None

	def is_enabled(self) -> bool:
		return self.storage.contains(LOCK_SERVICE, LOCK_ACCOUNT)

	def enable(self, passcode: str) -> bool:
		if not self.is_available():
			log.info("App lock not available: no passcode prompt")
			return False
		self.storage.set(LOCK_SERVICE, PASSCODE_ACCOUNT, hash_password(passcode))
		self.storage.set(LOCK_SERVICE, LOCK_ACCOUNT, _MARKER, requires_auth=True)
		log.info("App lock enabled")
		return True

	def disable(self) -> None:
		self.storage.delete(LOCK_SERVICE, LOCK_ACCOUNT)
		self.storage.delete(LOCK_SERVICE, PASSCODE_ACCOUNT)
		log.info("App lock disabled")

	def verify_passcode(self, message: str) -> bool:
		hashed = self.storage.get(LOCK_SERVICE, PASSCODE_ACCOUNT)
		if hashed is None or self.prompt is None:
			return False
		return verify_password(self.prompt(message), hashed)

	def authenticate(self, message: str = 'Authenticate to access your secure notes') -> bool:
		"""True when the lock is off or the entered passcode matches."""
		try:
			if not self.is_enabled():
				return True
			return self.storage.get(LOCK_SERVICE, LOCK_ACCOUNT, prompt=message) is not None
		except SecureNotesError as e:
			log.warning("Authentication failed: %s", e)
			return False
