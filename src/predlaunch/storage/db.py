"""DuckDB connection and schema init."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import duckdb

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

SCHEMA_SQL = """
-- Sequences for auto-increment IDs
CREATE SEQUENCE IF NOT EXISTS event_seq START 1;
CREATE SEQUENCE IF NOT EXISTS custody_seq START 1;
CREATE SEQUENCE IF NOT EXISTS mint_seq START 1;

-- One row per launch, phase-dependent columns stay NULL until that phase
CREATE TABLE IF NOT EXISTS launches (
    launch_id           VARCHAR PRIMARY KEY,
    authority           VARCHAR NOT NULL,
    name                VARCHAR NOT NULL,
    symbol              VARCHAR NOT NULL,
    total_supply        UBIGINT NOT NULL,
    phase               VARCHAR NOT NULL,
    discovery_end       BIGINT NOT NULL,
    predict_end         BIGINT NOT NULL,
    created_at          BIGINT NOT NULL,
    total_votes         UINTEGER NOT NULL DEFAULT 0,
    median_mcap         UBIGINT,
    total_locked        UBIGINT,
    settlement_value    UBIGINT,
    total_distributed   HUGEINT
);

-- Discovery votes, one per (launch, voter)
CREATE TABLE IF NOT EXISTS votes (
    launch_id       VARCHAR NOT NULL,
    voter           VARCHAR NOT NULL,
    mcap_vote       UBIGINT NOT NULL,
    timestamp       BIGINT NOT NULL,
    PRIMARY KEY (launch_id, voter)
);

-- Predict-phase bets, one per placement
CREATE TABLE IF NOT EXISTS bets (
    bet_id          VARCHAR PRIMARY KEY,
    launch_id       VARCHAR NOT NULL,
    bettor          VARCHAR NOT NULL,
    breakpoint      UBIGINT NOT NULL,
    is_yes          BOOLEAN NOT NULL,
    amount          UBIGINT NOT NULL,
    multiplier      USMALLINT NOT NULL,
    timestamp       BIGINT NOT NULL,
    claimed         BOOLEAN NOT NULL DEFAULT FALSE
);

-- Notification log (append-only)
CREATE TABLE IF NOT EXISTS launch_events (
    id              BIGINT PRIMARY KEY DEFAULT nextval('event_seq'),
    launch_id       VARCHAR NOT NULL,
    event_type      VARCHAR NOT NULL,
    ts              BIGINT NOT NULL,
    payload         JSON NOT NULL
);

-- Stake movements into launch vaults
CREATE TABLE IF NOT EXISTS custody (
    id              BIGINT PRIMARY KEY DEFAULT nextval('custody_seq'),
    launch_id       VARCHAR NOT NULL,
    vault           VARCHAR NOT NULL,
    account         VARCHAR NOT NULL,
    amount          UBIGINT NOT NULL,
    created_at      BIGINT NOT NULL
);

-- Token issuance requested by claims
CREATE TABLE IF NOT EXISTS mints (
    id              BIGINT PRIMARY KEY DEFAULT nextval('mint_seq'),
    launch_id       VARCHAR NOT NULL,
    bet_id          VARCHAR NOT NULL,
    recipient       VARCHAR NOT NULL,
    tokens          UBIGINT NOT NULL,
    created_at      BIGINT NOT NULL
);
"""


def get_connection(db_path: str | Path, read_only: bool = False) -> DuckDBPyConnection:
    """Return a DuckDB connection. Caller must close or use as context manager.
    ":memory:" opens an in-memory database."""
    if str(db_path) == ":memory:":
        return duckdb.connect(":memory:")
    path = Path(db_path)
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def init_schema(conn: DuckDBPyConnection) -> None:
    """Create tables and sequences if they do not exist. Safe to call repeatedly."""
    conn.execute(SCHEMA_SQL)
