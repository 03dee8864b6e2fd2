"""DuckDB schema for the curation report."""

import duckdb


def ensure_schema(conn: duckdb.DuckDBPyConnection) -> None:
    """Create tables and indexes if they do not exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS curation_runs (
            run_id               VARCHAR PRIMARY KEY,
            root                 VARCHAR NOT NULL,
            started_at           TIMESTAMP NOT NULL,
            finished_at          TIMESTAMP,
            total_files          INTEGER NOT NULL DEFAULT 0,
            deleted_count        INTEGER NOT NULL DEFAULT 0,
            cancelled            BOOLEAN NOT NULL DEFAULT false,
            delete_non_human     BOOLEAN NOT NULL,
            only_keep_female     BOOLEAN NOT NULL,
            confidence_threshold FLOAT NOT NULL,
            iou_threshold        FLOAT NOT NULL
        )
    """)

    # One row per file reached by a run (1:N with curation_runs)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS curation_decisions (
            run_id      VARCHAR NOT NULL,
            file_path   VARCHAR NOT NULL,
            status      VARCHAR NOT NULL,
            has_person  BOOLEAN NOT NULL,
            deleted     BOOLEAN NOT NULL,
            error       VARCHAR,
            decided_at  TIMESTAMP DEFAULT current_timestamp,
            PRIMARY KEY (run_id, file_path),
            FOREIGN KEY (run_id) REFERENCES curation_runs(run_id)
        )
    """)
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_decisions_status ON curation_decisions(status)"
    )
