"""Tests for the DuckDB curation report."""

from datetime import UTC, datetime
from pathlib import Path

import duckdb

from photo_curator.curation.report_repository import (
    get_run_decisions,
    get_run_stats,
    insert_decisions,
    list_runs,
    save_run,
)
from photo_curator.curation.schema import ensure_schema
from photo_curator.models import CurationDecision, DecisionStatus, RunConfig, RunSummary


def _summary() -> RunSummary:
    return RunSummary(
        total_files=3,
        decisions=[
            CurationDecision(Path("/photos/a.jpg"), DecisionStatus.DELETED, deleted=True),
            CurationDecision(Path("/photos/b.jpg"), DecisionStatus.KEPT, has_person=True),
            CurationDecision(Path("/photos/c.jpg"), DecisionStatus.ERROR, error="corrupt"),
        ],
    )


def test_ensure_schema_idempotent():
    conn = duckdb.connect(":memory:")
    ensure_schema(conn)
    ensure_schema(conn)  # Should not raise
    tables = conn.execute(
        "SELECT table_name FROM information_schema.tables WHERE table_schema = 'main'"
    ).fetchall()
    table_names = {row[0] for row in tables}
    assert {"curation_runs", "curation_decisions"} <= table_names
    conn.close()


def test_save_run_and_read_back(db_conn):
    started = datetime(2024, 1, 1, tzinfo=UTC)
    run_id = save_run(db_conn, "/photos", RunConfig(), _summary(), started, started)

    decisions = get_run_decisions(db_conn, run_id)
    assert [d.file_path.name for d in decisions] == ["a.jpg", "b.jpg", "c.jpg"]
    assert decisions[0].status == DecisionStatus.DELETED
    assert decisions[0].deleted is True
    assert decisions[1].has_person is True
    assert decisions[2].error == "corrupt"

    assert get_run_stats(db_conn, run_id) == (3, 1, 1)


def test_insert_decisions_idempotent(db_conn):
    summary = _summary()
    run_id = save_run(db_conn, "/photos", RunConfig(), summary, datetime.now(UTC))
    insert_decisions(db_conn, run_id, summary.decisions)  # Should not raise

    count = db_conn.execute("SELECT COUNT(*) FROM curation_decisions").fetchone()[0]
    assert count == 3


def test_list_runs_newest_first(db_conn):
    old = save_run(
        db_conn, "/old", RunConfig(), RunSummary(total_files=0), datetime(2023, 5, 1, tzinfo=UTC)
    )
    new = save_run(
        db_conn, "/new", RunConfig(), _summary(), datetime(2024, 5, 1, tzinfo=UTC)
    )
    runs = list_runs(db_conn)
    assert [r.run_id for r in runs] == [new, old]
    assert runs[0].deleted_count == 1
    assert runs[0].total_files == 3
    assert runs[1].root == "/old"


def test_unknown_run_is_empty(db_conn):
    assert get_run_decisions(db_conn, "missing") == []
    assert get_run_stats(db_conn, "missing") == (0, 0, 0)
