"""Project configuration settings.

Constants live here; paths are resolved on each call so environment
overrides set by tests (or the shell) take effect without a reload.
"""

from pathlib import Path
import os

# Security / crypto
KEY_LENGTH = 32  # AES-256
IV_LENGTH = 16   # AES block size
SALT_LENGTH = 16
MAC_LENGTH = 32  # HMAC-SHA256 tag
PBKDF2_ITERATIONS = 10_000

# Secure storage entries
KEYCHAIN_SERVICE = "com.securenotes.encryption"
KEYCHAIN_ACCOUNT = "SecureNotesApp"
SALT_ACCOUNT = "SecureNotesSalt"
LOCK_SERVICE = "com.securenotes.lock"
LOCK_ACCOUNT = "secureNotesUser"
PASSCODE_ACCOUNT = "passcodeHash"

# Database
TABLE_NAME = "notes"
DATABASE_NAME = "securenotes.db"
KEYCHAIN_NAME = "keychain.json"

# Logging
LOG_LEVEL = "INFO"
LOG_FILE = "securenotes.log"
LOG_MAX_BYTES = 1_048_576
LOG_BACKUP_COUNT = 5


def data_dir() -> Path:
	env = os.environ.get("SECURENOTES_HOME")
	return Path(env) if env else Path.home() / ".securenotes"


def db_path() -> Path:
	env = os.environ.get("SECURENOTES_DB")
	return Path(env) if env else data_dir() / DATABASE_NAME


def keychain_path() -> Path:
	env = os.environ.get("SECURENOTES_KEYCHAIN")
	return Path(env) if env else data_dir() / KEYCHAIN_NAME


def log_level() -> str:
	return os.environ.get("SECURENOTES_LOG_LEVEL", LOG_LEVEL).upper()


__all__ = [
	'KEY_LENGTH','IV_LENGTH','SALT_LENGTH','MAC_LENGTH','PBKDF2_ITERATIONS',
	'KEYCHAIN_SERVICE','KEYCHAIN_ACCOUNT','SALT_ACCOUNT','LOCK_SERVICE','LOCK_ACCOUNT','PASSCODE_ACCOUNT',
	'TABLE_NAME','DATABASE_NAME','KEYCHAIN_NAME',
	'LOG_LEVEL','LOG_FILE','LOG_MAX_BYTES','LOG_BACKUP_COUNT',
	'data_dir','db_path','keychain_path','log_level'
]
