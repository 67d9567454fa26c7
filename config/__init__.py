"""Configuration settings and constants for securenotes.

Everything is defined in :mod:`config.settings`; this package re-exports it
so application code can write ``from config import KEY_LENGTH``.
"""

from .settings import *  # noqa: F401,F403
from .settings import __all__  # noqa: F401
