"""NoteTable: tabular view over a note listing.

Loads notes into an in-memory DuckDB table and returns :mod:`polars`
DataFrames, for overviews such as "notes per project" or "tag counts".

Usage::

    table = NoteTable(repository.list_notes())

    # Free-form SQL
    df = table.query("SELECT id, title FROM notes WHERE 'python' = ANY(tags)")

    # Pre-built views
    view   = table.table_view(area="work", order_by="last_modified")
    counts = table.tag_counts()
    groups = table.group_by("project")
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import duckdb
import polars as pl

from queyd.filters import parse_timestamp
from queyd.note import Note

#: Columns that :meth:`NoteTable.group_by` and ``order_by`` accept
COLUMNS = ("id", "uuid", "title", "project", "area", "tags", "url", "created", "last_modified")


class NoteTable:
    """In-memory DuckDB table of note metadata."""

    def __init__(self, notes: Iterable[Note]) -> None:
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(":memory:")
        self.refresh(notes)

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def refresh(self, notes: Iterable[Note]) -> None:
        """(Re-)populate the table from *notes*."""
        self._create_schema()
        self._load_notes(notes)

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE OR REPLACE TABLE notes (
                id            VARCHAR PRIMARY KEY,
                uuid          VARCHAR,
                title         VARCHAR,
                project       VARCHAR,
                area          VARCHAR,
                tags          VARCHAR[],
                url           VARCHAR,
                created       TIMESTAMPTZ,
                last_modified TIMESTAMPTZ
            )
        """)

    def _load_notes(self, notes: Iterable[Note]) -> None:
        rows = [
            (
                note.id,
                note.uuid,
                note.title,
                note.project,
                note.area,
                note.tags,
                note.url,
                parse_timestamp(note.date_of.creation),
                parse_timestamp(note.date_of.last_modification),
            )
            for note in notes
        ]
        if rows:
            self.conn.executemany("INSERT OR REPLACE INTO notes VALUES (?,?,?,?,?,?,?,?,?)", rows)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query(self, sql: str, params: list[Any] | None = None) -> pl.DataFrame:
        """Run a raw SQL query and return a Polars DataFrame."""
        return self.conn.execute(sql, params or []).pl()

    def table_view(
        self,
        *,
        area: str | None = None,
        project: str | None = None,
        tag: str | None = None,
        columns: list[str] | None = None,
        order_by: str = "id",
    ) -> pl.DataFrame:
        """Return notes as a DataFrame, optionally narrowed by area, project or tag.

        Parameters
        ----------
        columns:
            Which columns to include.  Defaults to ``id, title, project, area, tags``.
        order_by:
            Column name to sort by; must be one of :data:`COLUMNS`.
        """
        cols = list(columns) if columns else ["id", "title", "project", "area", "tags"]
        for name in (*cols, order_by):
            _check_column(name)

        where: list[str] = []
        params: list[Any] = []
        if area is not None:
            where.append("area = ?")
            params.append(area)
        if project is not None:
            where.append("project = ?")
            params.append(project)
        if tag is not None:
            where.append("list_contains(tags, ?)")
            params.append(tag)

        clause = f"WHERE {' AND '.join(where)}" if where else ""
        sql = f"SELECT {', '.join(cols)} FROM notes {clause} ORDER BY {order_by}, id"
        return self.query(sql, params)

    def group_by(self, column: str = "project") -> dict[str, list[dict[str, Any]]]:
        """Group notes by *column*; empty values are grouped under ``"(none)"``."""
        _check_column(column)
        df = self.query(
            f"""
            SELECT id, title, tags,
                   COALESCE(NULLIF(CAST({column} AS VARCHAR), ''), '(none)') AS group_val
            FROM notes
            ORDER BY group_val, id
            """
        )
        groups: dict[str, list[dict[str, Any]]] = {}
        for row in df.to_dicts():
            gv = str(row.pop("group_val"))
            groups.setdefault(gv, []).append(row)
        return groups

    def tag_counts(self) -> pl.DataFrame:
        """Return a tag → count table sorted by frequency."""
        return self.query(
            """
            SELECT tag, COUNT(*) AS note_count
            FROM (SELECT unnest(tags) AS tag FROM notes)
            GROUP BY tag
            ORDER BY note_count DESC, tag
            """
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "NoteTable":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


def _check_column(name: str) -> None:
    if name not in COLUMNS:
        raise ValueError(f"Unknown column {name!r}; expected one of {', '.join(COLUMNS)}")
