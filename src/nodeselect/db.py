"""GraphDB: link-edge store over a :class:`NoteGraph`.

Uses DuckDB (in-memory) as the query engine over nodes, link edges and
references.  Tabular results come back as :mod:`polars` DataFrames.

Usage::

    db = GraphDB(graph)

    sources = db.backlink_sources("20240101-alpha")          # incoming "id" edges
    targets = db.forward_targets("20240101-alpha", "https")  # outgoing web links

    df = db.query("SELECT type, COUNT(*) AS n FROM links GROUP BY type")
    df = db.query("SELECT ref FROM refs WHERE type = ?", ["cite"])
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import duckdb
import polars as pl

if TYPE_CHECKING:
    from nodeselect.index import NoteGraph


class GraphDB:
    """In-memory DuckDB database over the graph's nodes, links and refs."""

    def __init__(self, graph: "NoteGraph") -> None:
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(":memory:")
        self.refresh(graph)

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def refresh(self, graph: "NoteGraph") -> None:
        """(Re-)populate the database from *graph* (call after a rebuild)."""
        self._graph = graph
        self._create_schema()
        self._load()

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE OR REPLACE TABLE nodes (
                id      VARCHAR PRIMARY KEY,
                title   VARCHAR,
                file    VARCHAR,
                point   INTEGER,
                level   INTEGER,
                tags    VARCHAR[],
                aliases VARCHAR[]
            )
        """)
        self.conn.execute("""
            CREATE OR REPLACE TABLE links (
                seq    INTEGER,
                source VARCHAR,
                dest   VARCHAR,
                type   VARCHAR,
                pos    INTEGER
            )
        """)
        self.conn.execute("""
            CREATE OR REPLACE TABLE refs (
                ref     VARCHAR,
                node_id VARCHAR,
                type    VARCHAR
            )
        """)

    def _load(self) -> None:
        graph = self._graph
        nodes = [
            (n.id, n.title, str(n.file), n.point, n.level, n.tags, n.aliases)
            for n in graph.nodes.values()
        ]
        if nodes:
            self.conn.executemany("INSERT INTO nodes VALUES (?,?,?,?,?,?,?)", nodes)
        links = [
            (seq, link.source, link.dest, link.type, link.pos)
            for seq, link in enumerate(graph.links)
        ]
        if links:
            self.conn.executemany("INSERT INTO links VALUES (?,?,?,?,?)", links)
        refs = [(r.ref, r.node.id, r.type) for r in graph.refs]
        if refs:
            self.conn.executemany("INSERT INTO refs VALUES (?,?,?)", refs)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query(self, sql: str, params: list | None = None) -> pl.DataFrame:
        """Run a raw SQL query and return a Polars DataFrame."""
        return self.conn.execute(sql, params or []).pl()

    def backlink_sources(self, dest: str, link_type: str = "id") -> list[str]:
        """Return distinct ids of nodes with a *link_type* edge pointing at *dest*."""
        df = self.query(
            "SELECT source FROM links WHERE dest = ? AND type = ? ORDER BY seq",
            [dest, link_type],
        )
        return df["source"].unique(maintain_order=True).to_list()

    def forward_targets(self, source: str, link_type: str = "id") -> list[str]:
        """Return distinct targets of *link_type* edges leaving *source*."""
        df = self.query(
            "SELECT dest FROM links WHERE source = ? AND type = ? ORDER BY seq",
            [source, link_type],
        )
        return df["dest"].unique(maintain_order=True).to_list()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "GraphDB":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
