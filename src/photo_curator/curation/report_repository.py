"""CRUD operations for curation runs and decisions in DuckDB."""

import uuid
from datetime import datetime
from pathlib import Path

import duckdb

from photo_curator.models import (
    CurationDecision,
    DecisionStatus,
    RunConfig,
    RunRecord,
    RunSummary,
)


def save_run(
    conn: duckdb.DuckDBPyConnection,
    root: str | Path,
    config: RunConfig,
    summary: RunSummary,
    started_at: datetime,
    finished_at: datetime | None = None,
) -> str:
    """Store a run and all of its decisions. Returns the new run ID."""
    run_id = str(uuid.uuid4())
    insert_run(conn, run_id, root, config, summary, started_at, finished_at)
    insert_decisions(conn, run_id, summary.decisions)
    return run_id


def insert_run(
    conn: duckdb.DuckDBPyConnection,
    run_id: str,
    root: str | Path,
    config: RunConfig,
    summary: RunSummary,
    started_at: datetime,
    finished_at: datetime | None = None,
) -> None:
    """Insert a single run row. Updates counts on ID conflict."""
    conn.execute(
        """
        INSERT INTO curation_runs
        (run_id, root, started_at, finished_at, total_files, deleted_count, cancelled,
         delete_non_human, only_keep_female, confidence_threshold, iou_threshold)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT (run_id) DO UPDATE SET
            finished_at = EXCLUDED.finished_at,
            total_files = EXCLUDED.total_files,
            deleted_count = EXCLUDED.deleted_count,
            cancelled = EXCLUDED.cancelled
        """,
        [
            run_id,
            str(root),
            started_at,
            finished_at,
            summary.total_files,
            summary.deleted_count,
            summary.cancelled,
            config.delete_non_human,
            config.only_keep_female,
            config.confidence_threshold,
            config.iou_threshold,
        ],
    )


def insert_decisions(
    conn: duckdb.DuckDBPyConnection,
    run_id: str,
    decisions: list[CurationDecision],
) -> None:
    """Batch insert decisions for a run. Skips on conflict (idempotent)."""
    for decision in decisions:
        conn.execute(
            """
            INSERT INTO curation_decisions
            (run_id, file_path, status, has_person, deleted, error)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT (run_id, file_path) DO NOTHING
            """,
            [
                run_id,
                str(decision.file_path),
                decision.status.value,
                decision.has_person,
                decision.deleted,
                decision.error,
            ],
        )


def get_run_decisions(conn: duckdb.DuckDBPyConnection, run_id: str) -> list[CurationDecision]:
    """Return all decisions stored for a run, ordered by file path."""
    rows = conn.execute(
        """
        SELECT file_path, status, has_person, deleted, error
        FROM curation_decisions
        WHERE run_id = ?
        ORDER BY file_path
        """,
        [run_id],
    ).fetchall()
    return [_row_to_decision(row) for row in rows]


def get_run_stats(conn: duckdb.DuckDBPyConnection, run_id: str) -> tuple[int, int, int]:
    """Return (decisions, deleted, errors) for a run."""
    row = conn.execute(
        """
        SELECT
            COUNT(*),
            COUNT(*) FILTER (WHERE deleted),
            COUNT(*) FILTER (WHERE status IN ('error', 'delete_failed'))
        FROM curation_decisions
        WHERE run_id = ?
        """,
        [run_id],
    ).fetchone()
    if row is None:
        return 0, 0, 0
    return row[0], row[1], row[2]


def list_runs(conn: duckdb.DuckDBPyConnection, limit: int = 20) -> list[RunRecord]:
    """Return the most recent runs first."""
    rows = conn.execute(
        """
        SELECT run_id, root, started_at, finished_at, total_files, deleted_count, cancelled
        FROM curation_runs
        ORDER BY started_at DESC
        LIMIT ?
        """,
        [limit],
    ).fetchall()
    return [
        RunRecord(
            run_id=row[0],
            root=row[1],
            started_at=row[2],
            finished_at=row[3],
            total_files=row[4],
            deleted_count=row[5],
            cancelled=row[6],
        )
        for row in rows
    ]


def _row_to_decision(row: tuple) -> CurationDecision:
    """Convert a database row to a CurationDecision."""
    return CurationDecision(
        file_path=Path(row[0]),
        status=DecisionStatus(row[1]),
        has_person=row[2],
        deleted=row[3],
        error=row[4],
    )
