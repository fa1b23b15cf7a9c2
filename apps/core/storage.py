"""
Storage failure translation.

Database drivers raise ``OperationalError`` for timeouts, locked databases
and dropped connections. Service functions are wrapped with
``storage_guard`` so those surface as ``StorageUnavailableError`` instead
of leaking driver exceptions to callers.
"""

import functools
import logging

from django.db import InterfaceError, OperationalError

from .exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)


def storage_guard(func):
    """Translate operational database errors raised by ``func``."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as e:
            logger.warning("Storage failure in %s: %s", func.__qualname__, e)
            raise StorageUnavailableError(f"Storage unavailable: {e}") from e

    return wrapper
