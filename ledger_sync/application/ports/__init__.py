"""Application ports package."""

from .database import DatabaseEnginePort
from .ledger_codec import LedgerCodecPort
from .ledger_store import LedgerStorePort

__all__ = [
    "DatabaseEnginePort",
    "LedgerCodecPort",
    "LedgerStorePort",
]
