# confidential_core/storage/__init__.py

from .models import KeyEntry
from .keystore import KeyStore

__all__ = [
    "KeyEntry",
    "KeyStore",
]
