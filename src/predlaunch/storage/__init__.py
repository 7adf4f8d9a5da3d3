"""Keyed launch stores (in-memory, DuckDB) and DuckDB-backed ledgers."""
