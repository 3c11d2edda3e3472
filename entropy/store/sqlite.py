"""
SQLite-backed KeyValue store for the reference host.

Features
--------
- Byte-oriented KV: (key BLOB PRIMARY KEY, value BLOB NOT NULL)
- Explicit write transactions: `with kv.transaction(): ...` commits on
  success and rolls back on error, which is how the reference host makes an
  invocation's writes land together or not at all.
- WAL journal with synchronous=NORMAL.

Implemented on top of stdlib `sqlite3`; satisfies `entropy.store.KeyValue`.
"""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Optional


def _ensure_dir(path: str) -> None:
    d = os.path.dirname(os.path.abspath(path))
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)


def _apply_pragmas(conn: sqlite3.Connection) -> None:
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA temp_store=MEMORY;")


def _init_schema(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS kv (
            key   BLOB PRIMARY KEY,
            value BLOB NOT NULL
        );
        """
    )


@dataclass
class SQLiteKeyValue:
    """
    SQLite implementation of the KeyValue protocol.

    Parameters
    ----------
    path : str
        Database file. Parent directories are created if needed.
        ":memory:" opens a private in-memory database.

    Example
    -------
    >>> kv = SQLiteKeyValue("/tmp/entropy_state.db")
    >>> with kv.transaction():
    ...     kv.set(b"seed", b"\\x00" * 32)
    >>> kv.get(b"seed") == b"\\x00" * 32
    True
    >>> kv.close()
    """

    path: str

    def __post_init__(self) -> None:
        if self.path != ":memory:":
            _ensure_dir(self.path)
        # isolation_level=None -> autocommit; BEGIN/COMMIT are issued explicitly.
        self._conn = sqlite3.connect(self.path, isolation_level=None, timeout=30.0)
        if self.path != ":memory:":
            _apply_pragmas(self._conn)
        _init_schema(self._conn)
        self._in_tx = False

    def __enter__(self) -> "SQLiteKeyValue":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- KV API --------------------------------------------------------------

    def set(self, key: bytes, value: bytes) -> None:
        if not isinstance(key, (bytes, bytearray)) or not isinstance(value, (bytes, bytearray)):
            raise TypeError("key and value must be bytes")
        self._conn.execute(
            "INSERT OR REPLACE INTO kv(key, value) VALUES(?, ?)", (bytes(key), bytes(value))
        )

    def get(self, key: bytes) -> Optional[bytes]:
        row = self._conn.execute("SELECT value FROM kv WHERE key = ?", (bytes(key),)).fetchone()
        return bytes(row[0]) if row else None

    def delete(self, key: bytes) -> None:
        self._conn.execute("DELETE FROM kv WHERE key = ?", (bytes(key),))

    def has(self, key: bytes) -> bool:
        row = self._conn.execute("SELECT 1 FROM kv WHERE key = ?", (bytes(key),)).fetchone()
        return row is not None

    # --- Transactions --------------------------------------------------------

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """
        Begin a write transaction (IMMEDIATE). Commits on success, rolls back on error.

        Not reentrant; a single connection serves a single thread.
        """
        if self._in_tx:
            raise RuntimeError("transaction already open on this connection")
        self._conn.execute("BEGIN IMMEDIATE;")
        self._in_tx = True
        try:
            yield
        except BaseException:
            self._conn.execute("ROLLBACK;")
            raise
        else:
            self._conn.execute("COMMIT;")
        finally:
            self._in_tx = False

    def close(self) -> None:
        self._conn.close()


__all__ = ["SQLiteKeyValue"]
