"""Group expense ledger with balance reconciliation and debt settlement."""

__version__ = "0.1.0"
