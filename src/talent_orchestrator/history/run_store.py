"""SQLite-backed audit log of orchestrator runs."""

from __future__ import annotations

import hashlib
import json
import sqlite3
from datetime import datetime
from pathlib import Path

from talent_orchestrator.history.models import RunJobRecord, RunRecord
from talent_orchestrator.models.guard import GuardReport
from talent_orchestrator.models.run import RunOutput
from talent_orchestrator.models.tailoring import CoverLetterPack, TailoredResume

DEFAULT_DB_PATH = Path.home() / ".talent-orchestrator" / "runs.db"


def hash_text(text: str) -> str:
    """SHA-256 hex digest, so raw resume text never reaches storage or logs."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class RunStore:
    """SQLite-backed store for run start/completion events with WAL mode."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS runs (
                    run_id TEXT PRIMARY KEY,
                    run_type TEXT NOT NULL,
                    resume_hash TEXT NOT NULL,
                    status TEXT NOT NULL,
                    token_budget_total INTEGER NOT NULL DEFAULT 0,
                    token_budget_used INTEGER NOT NULL DEFAULT 0,
                    estimated_cost_usd REAL NOT NULL DEFAULT 0.0,
                    notes TEXT NOT NULL DEFAULT '[]',
                    error_message TEXT,
                    started_at TEXT NOT NULL,
                    completed_at TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS run_jobs (
                    run_id TEXT NOT NULL,
                    job_index INTEGER NOT NULL,
                    job_id TEXT NOT NULL,
                    job_title TEXT,
                    job_company TEXT,
                    score INTEGER,
                    must_have_pct REAL,
                    tailored INTEGER NOT NULL DEFAULT 0,
                    guard_verdict TEXT,
                    tailored_resume_json TEXT,
                    cover_letter_json TEXT,
                    guard_report_json TEXT,
                    PRIMARY KEY (run_id, job_index)
                )
            """)

    def record_start(
        self,
        run_id: str,
        run_type: str,
        resume_hash: str,
        token_budget_total: int,
    ) -> None:
        """Insert a run in the running state."""
        record = RunRecord(
            run_id=run_id,
            run_type=run_type,
            resume_hash=resume_hash,
            token_budget_total=token_budget_total,
        )
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO runs
                   (run_id, run_type, resume_hash, status, token_budget_total,
                    token_budget_used, estimated_cost_usd, notes, error_message,
                    started_at, completed_at)
                   VALUES (?, ?, ?, ?, ?, 0, 0.0, '[]', NULL, ?, NULL)""",
                (
                    record.run_id,
                    record.run_type,
                    record.resume_hash,
                    record.status,
                    record.token_budget_total,
                    record.started_at.isoformat(),
                ),
            )

    def record_completion(
        self,
        run_id: str,
        output: RunOutput,
        estimated_cost_usd: float = 0.0,
    ) -> None:
        """Store the final status, budget use, notes and one row per ranked job.

        Tailored jobs also keep their resume, cover letter and guard report as JSON.
        """
        tailored = {t.job_id: t for t in output.tailored_outputs}
        with self._connect() as conn:
            conn.execute(
                """UPDATE runs
                   SET status = ?, token_budget_used = ?, estimated_cost_usd = ?,
                       notes = ?, error_message = ?, completed_at = ?
                   WHERE run_id = ?""",
                (
                    output.status,
                    output.budget.token_used_estimate,
                    estimated_cost_usd,
                    json.dumps(output.notes_for_ui, ensure_ascii=False),
                    output.error,
                    datetime.now().isoformat(),
                    run_id,
                ),
            )
            conn.execute("DELETE FROM run_jobs WHERE run_id = ?", (run_id,))
            for index, ranked in enumerate(output.ranked_jobs):
                entry = tailored.get(ranked.job_id)
                conn.execute(
                    """INSERT INTO run_jobs
                       (run_id, job_index, job_id, job_title, job_company, score,
                        must_have_pct, tailored, guard_verdict, tailored_resume_json,
                        cover_letter_json, guard_report_json)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        run_id,
                        index,
                        ranked.job_id,
                        ranked.job.title,
                        ranked.job.company,
                        ranked.match.score,
                        ranked.match.must_have_coverage_pct,
                        1 if entry else 0,
                        entry.guard_report.verdict if entry else None,
                        entry.tailored_resume.model_dump_json() if entry else None,
                        entry.cover_letter.model_dump_json() if entry else None,
                        entry.guard_report.model_dump_json() if entry else None,
                    ),
                )

    def set_cost(self, run_id: str, estimated_cost_usd: float) -> None:
        with self._connect() as conn:
            conn.execute(
                "UPDATE runs SET estimated_cost_usd = ? WHERE run_id = ?",
                (estimated_cost_usd, run_id),
            )

    def record_failure(self, run_id: str, message: str) -> None:
        """Mark a run that ended with an exception."""
        with self._connect() as conn:
            conn.execute(
                """UPDATE runs SET status = 'failed', error_message = ?, completed_at = ?
                   WHERE run_id = ?""",
                (message, datetime.now().isoformat(), run_id),
            )

    def get_runs(self, limit: int = 10) -> list[RunRecord]:
        """Most recent runs first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM runs ORDER BY started_at DESC, rowid DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_run(row) for row in rows]

    def get_run(self, run_id: str) -> RunRecord | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM runs WHERE run_id = ?", (run_id,)).fetchone()
        return self._row_to_run(row) if row else None

    def get_run_jobs(self, run_id: str) -> list[RunJobRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM run_jobs WHERE run_id = ? ORDER BY job_index",
                (run_id,),
            ).fetchall()
        return [
            RunJobRecord(
                run_id=row[0],
                job_index=row[1],
                job_id=row[2],
                job_title=row[3],
                job_company=row[4],
                score=row[5],
                must_have_pct=row[6],
                tailored=bool(row[7]),
                guard_verdict=row[8],
                tailored_resume=TailoredResume.model_validate_json(row[9]) if row[9] else None,
                cover_letter=CoverLetterPack.model_validate_json(row[10]) if row[10] else None,
                guard_report=GuardReport.model_validate_json(row[11]) if row[11] else None,
            )
            for row in rows
        ]

    @staticmethod
    def _row_to_run(row: tuple) -> RunRecord:
        return RunRecord(
            run_id=row[0],
            run_type=row[1],
            resume_hash=row[2],
            status=row[3],
            token_budget_total=row[4],
            token_budget_used=row[5],
            estimated_cost_usd=row[6],
            notes=json.loads(row[7]),
            error_message=row[8],
            started_at=datetime.fromisoformat(row[9]),
            completed_at=datetime.fromisoformat(row[10]) if row[10] else None,
        )
