"""Secure key/value storage keyed by (service, account).

Stands in for the platform keychain. Entries written with
``requires_auth=True`` are only released after the configured
authenticator callback approves the read.
"""
from __future__ import annotations
import json, os, logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from .errors import StorageUnavailable, AuthenticationFailed

log = logging.getLogger(__name__)

Authenticator = Callable[[str], bool]


class SecureStorage(ABC):
	"""Interface every secure storage backend implements.

	Backends provide ``set``, ``delete`` and ``_read``; authentication of
	``requires_auth`` entries happens here in ``get``.
	"""

	def __init__(self, authenticator: Optional[Authenticator] = None):
		self.authenticator = authenticator

	def get(self, service: str, account: str, prompt: str = 'Authenticate to continue') -> Optional[str]:
		entry = self._read(service, account)
		if entry is None:
			return None
		secret, requires_auth = entry
		if requires_auth:
			if self.authenticator is None or not self.authenticator(prompt):
				raise AuthenticationFailed(f'Access to {service}/{account} was not authorised')
		return secret

	def contains(self, service: str, account: str) -> bool:
		"""Whether an entry exists; never triggers authentication."""
		return self._read(service, account) is not None

	@abstractmethod
	def set(self, service: str, account: str, secret: str, *, requires_auth: bool = False) -> None:
		raise NotImplementedError

	@abstractmethod
	def delete(self, service: str, account: str) -> None:
		raise NotImplementedError

	@abstractmethod
	def _read(self, service: str, account: str) -> Optional[Tuple[str, bool]]:
		raise NotImplementedError


class MemorySecureStorage(SecureStorage):
	def __init__(self, authenticator: Optional[Authenticator] = None):
		super().__init__(authenticator)
		self._entries: Dict[Tuple[str, str], Tuple[str, bool]] = {}

	def set(self, service: str, account: str, secret: str, *, requires_auth: bool = False) -> None:
		self._entries[(service, account)] = (secret, requires_auth)

	def delete(self, service: str, account: str) -> None:
		self._entries.pop((service, account), None)

	def _read(self, service: str, account: str) -> Optional[Tuple[str, bool]]:
		return self._entries.get((service, account))


class FileSecureStorage(SecureStorage):
	"""JSON file readable only by its owner (mode 0600).

	Layout: ``{"<service>": {"<account>": {"secret": str, "requires_auth": bool}}}``.
	"""

	def __init__(self, path: Path, authenticator: Optional[Authenticator] = None):
		super().__init__(authenticator)
		self.path = Path(path)

	def set(self, service: str, account: str, secret: str, *, requires_auth: bool = False) -> None:
		data = self._load()
		data.setdefault(service, {})[account] = {'secret': secret, 'requires_auth': requires_auth}
		self._write(data)

	def delete(self, service: str, account: str) -> None:
		data = self._load()
		accounts = data.get(service)
		if not accounts or account not in accounts:
			return
		del accounts[account]
		if not accounts:
			del data[service]
		self._write(data)

	def _read(self, service: str, account: str) -> Optional[Tuple[str, bool]]:
		raw = self._load().get(service, {}).get(account)
		if raw is None:
			return None
		return raw['secret'], bool(raw.get('requires_auth', False))

	def _load(self) -> Dict[str, Dict[str, dict]]:
		if not self.path.exists():
			return {}
		try:
			data = json.loads(self.path.read_text(encoding='utf-8'))
		except (OSError, ValueError) as e:
			raise StorageUnavailable(f'Secure storage unreadable: {e}') from e
		if not isinstance(data, dict):
			raise StorageUnavailable('Secure storage is corrupt')
		return data

	def _write(self, data: Dict[str, Dict[str, dict]]) -> None:
		tmp = self.path.with_suffix('.tmp')
		try:
			self.path.parent.mkdir(parents=True, exist_ok=True)
			fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
			with os.fdopen(fd, 'w', encoding='utf-8') as f:
				json.dump(data, f)
			os.chmod(tmp, 0o600)
			os.replace(tmp, self.path)
		except OSError as e:
			log.error("Failed to write secure storage at %s", self.path)
			raise StorageUnavailable(f'Secure storage not writable: {e}') from e
