"""SettleUp: shared expense ledger with balance and settlement engine."""

__version__ = "1.0.0"
