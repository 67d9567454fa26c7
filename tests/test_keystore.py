import json
import stat
import pytest
from pathlib import Path
from config.settings import KEYCHAIN_SERVICE, KEYCHAIN_ACCOUNT, SALT_ACCOUNT
from securenotes.lib.errors import StorageUnavailable, AuthenticationFailed
from securenotes.lib.keystore import KeyStore
from securenotes.lib.secure_storage import FileSecureStorage, MemorySecureStorage

def test_key_is_created_once():
    ks = KeyStore(MemorySecureStorage())
    k1 = ks.get_key()
    k2 = ks.get_key()
    assert k1 == k2 and len(k1) == 32

def test_key_and_salt_are_stored():
    storage = MemorySecureStorage()
    key = KeyStore(storage).get_key()
    assert storage.get(KEYCHAIN_SERVICE, KEYCHAIN_ACCOUNT) == key.hex()
    assert len(bytes.fromhex(storage.get(KEYCHAIN_SERVICE, SALT_ACCOUNT))) == 16

def test_reset_produces_new_key():
    storage = MemorySecureStorage()
    ks = KeyStore(storage)
    k1 = ks.get_key()
    ks.reset()
    assert not storage.contains(KEYCHAIN_SERVICE, KEYCHAIN_ACCOUNT)
    assert not storage.contains(KEYCHAIN_SERVICE, SALT_ACCOUNT)
    assert ks.get_key() != k1

def test_reset_without_key_is_harmless():
    KeyStore(MemorySecureStorage()).reset()

def test_file_storage_persists_across_instances(tmp_path: Path):
    path = tmp_path / 'keychain.json'
    k1 = KeyStore(FileSecureStorage(path)).get_key()
    k2 = KeyStore(FileSecureStorage(path)).get_key()
    assert k1 == k2
    assert stat.S_IMODE(path.stat().st_mode) == 0o600

def test_corrupt_keychain_file(tmp_path: Path):
    path = tmp_path / 'keychain.json'
    path.write_text('{not json')
    with pytest.raises(StorageUnavailable):
        KeyStore(FileSecureStorage(path)).get_key()

def test_stored_key_with_bad_length(tmp_path: Path):
    path = tmp_path / 'keychain.json'
    path.write_text(json.dumps({KEYCHAIN_SERVICE: {KEYCHAIN_ACCOUNT: {'secret': 'abcd', 'requires_auth': False}}}))
    with pytest.raises(StorageUnavailable):
        KeyStore(FileSecureStorage(path)).get_key()

def test_unwritable_keychain(tmp_path: Path):
    blocker = tmp_path / 'file'
    blocker.write_text('x')
    with pytest.raises(StorageUnavailable):
        KeyStore(FileSecureStorage(blocker / 'keychain.json')).get_key()

def test_requires_auth_entries():
    answers = []
    storage = MemorySecureStorage(authenticator=lambda msg: answers.pop(0))
    storage.set('svc', 'acct', 'secret', requires_auth=True)
    answers.extend([True, False])
    assert storage.get('svc', 'acct') == 'secret'
    with pytest.raises(AuthenticationFailed):
        storage.get('svc', 'acct')

def test_delete_is_idempotent(tmp_path: Path):
    storage = FileSecureStorage(tmp_path / 'keychain.json')
    storage.delete('svc', 'acct')
    storage.set('svc', 'acct', 'v')
    storage.delete('svc', 'acct')
    storage.delete('svc', 'acct')
    assert storage.get('svc', 'acct') is None

def test_secure_storage_base_is_abstract():
    from securenotes.lib.secure_storage import SecureStorage
    with pytest.raises(TypeError):
        SecureStorage()
