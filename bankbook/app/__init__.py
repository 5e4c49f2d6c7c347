"""Single-operator account ledger backed by SQLite."""
