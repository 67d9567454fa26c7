"""Per-field encryption: AES-256-CBC with an HMAC-SHA256 tag (encrypt-then-MAC)."""
from __future__ import annotations
import base64, binascii, secrets
from typing import Tuple
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac, padding
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.backends import default_backend
from config.settings import KEY_LENGTH, IV_LENGTH, MAC_LENGTH

from .errors import CipherUnavailable, DecryptionFailed, InvalidIv
from .keystore import KeyStore

_SUBKEY_INFO = b'securenotes field cipher v1'
_BLOCK = algorithms.AES.block_size // 8


class FieldCipher:
	"""Encrypts single string fields with the key held by ``keystore``.

	Ciphertext is base64(``ct || tag``); the IV travels separately as 32 hex
	characters. The stored key is split into an encryption and a MAC subkey
	with HKDF so a wrong key fails the tag check instead of yielding garbage.
	"""

	def __init__(self, keystore: KeyStore):
		self.keystore = keystore
		self._backend = default_backend()
		probe = algorithms.AES(bytes(KEY_LENGTH))
		if not self._backend.cipher_supported(probe, modes.CBC(bytes(IV_LENGTH))):
			raise CipherUnavailable('AES-256-CBC is not supported by the crypto backend')

	def encrypt_field(self, plaintext: str) -> Tuple[str, str]:
		enc_key, mac_key = self._subkeys()
		iv = secrets.token_bytes(IV_LENGTH)
		padder = padding.PKCS7(algorithms.AES.block_size).padder()
		padded = padder.update(plaintext.encode('utf-8')) + padder.finalize()
		enc = Cipher(algorithms.AES(enc_key), modes.CBC(iv), backend=self._backend).encryptor()
		ct = enc.update(padded) + enc.finalize()
		tag = self._tag(mac_key, iv, ct)
		return base64.b64encode(ct + tag).decode('ascii'), iv.hex()

	def decrypt_field(self, ciphertext: str, iv: str) -> str:
		iv_bytes = self._parse_iv(iv)
		if not isinstance(ciphertext, str):
			raise DecryptionFailed('Ciphertext missing')
		try:
			blob = base64.b64decode(ciphertext, validate=True)
		except (binascii.Error, ValueError) as e:
			raise DecryptionFailed('Ciphertext is not valid base64') from e
		if len(blob) < _BLOCK + MAC_LENGTH or (len(blob) - MAC_LENGTH) % _BLOCK:
			raise DecryptionFailed('Ciphertext has invalid length')
		ct, tag = blob[:-MAC_LENGTH], blob[-MAC_LENGTH:]
		enc_key, mac_key = self._subkeys()
		h = hmac.HMAC(mac_key, hashes.SHA256(), backend=self._backend)
		h.update(iv_bytes + ct)
		try:
			h.verify(tag)
		except InvalidSignature as e:
			raise DecryptionFailed('Authentication failed - wrong key or corrupted data') from e
		dec = Cipher(algorithms.AES(enc_key), modes.CBC(iv_bytes), backend=self._backend).decryptor()
		try:
			padded = dec.update(ct) + dec.finalize()
			unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
			raw = unpadder.update(padded) + unpadder.finalize()
			return raw.decode('utf-8')
		except ValueError as e:
			raise DecryptionFailed(f'Decrypt failed: {e}') from e

	def _subkeys(self) -> Tuple[bytes, bytes]:
		key = self.keystore.get_key()
		hkdf = HKDF(algorithm=hashes.SHA256(), length=2 * KEY_LENGTH, salt=None, info=_SUBKEY_INFO, backend=self._backend)
		material = hkdf.derive(key)
		return material[:KEY_LENGTH], material[KEY_LENGTH:]

	def _tag(self, mac_key: bytes, iv: bytes, ct: bytes) -> bytes:
		h = hmac.HMAC(mac_key, hashes.SHA256(), backend=self._backend)
		h.update(iv + ct)
		return h.finalize()

	@staticmethod
	def _parse_iv(iv: str) -> bytes:
		if not iv or not isinstance(iv, str) or len(iv) != IV_LENGTH * 2:
			raise InvalidIv('Invalid initialization vector')
		try:
			raw = bytes.fromhex(iv)
		except ValueError as e:
			raise InvalidIv('Initialization vector is not hex') from e
		if len(raw) != IV_LENGTH:
			raise InvalidIv('Invalid initialization vector')
		return raw
