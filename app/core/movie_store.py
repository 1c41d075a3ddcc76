import json
import logging
import sqlite3
from contextlib import closing, contextmanager
from datetime import datetime, timezone
from typing import Iterator

from app.core.exceptions import EditConflictError, RecordNotFoundError, StoreError
from app.models.movie import Movie

SCHEMA = """
CREATE TABLE IF NOT EXISTS movies (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT NOT NULL,
    title TEXT NOT NULL,
    year INTEGER NOT NULL,
    runtime INTEGER NOT NULL,
    genres TEXT NOT NULL,
    version INTEGER NOT NULL DEFAULT 1
)
"""


class MovieStore:
    """
    SQLite-backed persistence for movies.

    Every call opens its own connection, so a single store can be shared by
    concurrent request handlers. Updates use optimistic concurrency: the row
    is only written when its version still matches the one the caller read.
    """

    def __init__(self, db_path: str, timeout: float = 5.0):
        self.db_path = db_path
        self.timeout = timeout

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            # writers take the lock at BEGIN and queue on the busy timeout
            conn = sqlite3.connect(self.db_path, timeout=self.timeout, isolation_level="IMMEDIATE")
            with closing(conn):
                with conn:
                    yield conn
        except sqlite3.Error as e:
            raise StoreError(details=str(e)) from e

    def init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(SCHEMA)
        logging.info("movies table ready in %s", self.db_path)

    def insert(self, movie: Movie) -> Movie:
        created_at = datetime.now(timezone.utc)
        query = """
        INSERT INTO movies (created_at, title, year, runtime, genres, version)
        VALUES (?, ?, ?, ?, ?, 1)
        """
        args = (created_at.isoformat(), movie.title, movie.year, movie.runtime, json.dumps(movie.genres or []))

        with self._connect() as conn:
            cursor = conn.execute(query, args)
            movie.id = cursor.lastrowid

        movie.created_at = created_at
        movie.version = 1
        return movie

    def get(self, id: int) -> Movie:
        if id < 1:
            raise RecordNotFoundError()

        query = """
        SELECT id, created_at, title, year, runtime, genres, version
        FROM movies
        WHERE id = ?
        """
        with self._connect() as conn:
            row = conn.execute(query, (id,)).fetchone()

        if row is None:
            raise RecordNotFoundError()

        return Movie(
            id=row[0],
            created_at=datetime.fromisoformat(row[1]),
            title=row[2],
            year=row[3],
            runtime=row[4],
            genres=json.loads(row[5]),
            version=row[6],
        )

    def update(self, movie: Movie) -> Movie:
        """
        Write movie back if the stored row still carries movie.version.

        On success the version is bumped by one on both the row and the
        passed movie. A row that has moved on (or vanished) raises
        EditConflictError and is left as it was.
        """
        query = """
        UPDATE movies
        SET title = ?, year = ?, runtime = ?, genres = ?, version = version + 1
        WHERE id = ? AND version = ?
        """
        args = (movie.title, movie.year, movie.runtime, json.dumps(movie.genres or []), movie.id, movie.version)

        with self._connect() as conn:
            cursor = conn.execute(query, args)
            updated = cursor.rowcount

        if updated == 0:
            logging.debug("edit conflict on movie id=%s version=%s", movie.id, movie.version)
            raise EditConflictError()

        movie.version += 1
        return movie

    def delete(self, id: int) -> None:
        if id < 1:
            raise RecordNotFoundError()

        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM movies WHERE id = ?", (id,))
            deleted = cursor.rowcount

        if deleted == 0:
            raise RecordNotFoundError()
