"""In-memory ledger state."""

from splitledger.ledger.store import UNKNOWN_PERSON_NAME, LedgerStore

__all__ = ["LedgerStore", "UNKNOWN_PERSON_NAME"]
