"""Domain records and pure validation helpers (no I/O)."""
