"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
import os
import uuid
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from talent_orchestrator.clients.llm_client import LLMClient
from talent_orchestrator.config import AppConfig, load_config
from talent_orchestrator.errors import OrchestratorError
from talent_orchestrator.history.run_store import RunStore
from talent_orchestrator.models.run import (
    CandidateHints,
    JobInput,
    RunCache,
    RunInput,
    RunLimits,
    RunOutput,
    RunType,
)
from talent_orchestrator.parsers.document_loader import load_document
from talent_orchestrator.pipeline.orchestrator import RunOrchestrator

app = typer.Typer(
    name="talent-orchestrator",
    help="Resume parsing, job matching and application packs on a token budget",
    no_args_is_help=True,
)
console = Console()


class RunTypeOption(str, Enum):
    resume_review = "resume_review"
    job_match = "job_match"
    apply_pack = "apply_pack"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def precheck(
    run_type: RunTypeOption,
    job_count: int,
    budget: int | None,
    config: AppConfig,
    stand_in: bool,
) -> tuple[str, str] | None:
    """Caller-side checks. Returns (error, stopped_reason) for a blocked run, else None."""
    if run_type is not RunTypeOption.resume_review and job_count == 0:
        return (f'run_type "{run_type.value}" requires at least one job', "invalid request")
    if budget is not None and budget > config.limits.token_budget_max:
        return (
            f"Token budget cannot exceed {config.limits.token_budget_max}",
            "budget_cap_exceeded",
        )
    if not stand_in and not os.environ.get("ANTHROPIC_API_KEY"):
        return ("AI service is not configured (ANTHROPIC_API_KEY not set)", "misconfiguration")
    return None


def _print_output(output: RunOutput) -> None:
    color = {"ok": "green", "partial": "yellow", "blocked": "red"}[output.status]
    budget = output.budget
    lines = [
        f"Status: [bold {color}]{output.status}[/bold {color}]",
        f"Tokens: {budget.token_used_estimate} / {budget.token_budget_total}",
    ]
    if budget.stopped_reason:
        lines.append(f"Stopped: {budget.stopped_reason}")
    if output.error:
        lines.append(f"[red]Error: {output.error}[/red]")
    console.print(Panel("\n".join(lines), title=f"Run {output.run_id}"))

    if output.resume is not None:
        skills = ", ".join(output.resume.skills[:12]) or "-"
        console.print(f"[dim]Resume: {output.resume.name or 'unknown'} | skills: {skills}[/dim]")

    if output.ranked_jobs:
        table = Table(title="Ranked jobs")
        table.add_column("#", justify="right")
        table.add_column("Job")
        table.add_column("Company")
        table.add_column("Score", justify="right")
        table.add_column("Must-have %", justify="right")
        table.add_column("Recommendation")
        for i, ranked in enumerate(output.ranked_jobs, start=1):
            table.add_row(
                str(i),
                ranked.job.title or ranked.job_id,
                ranked.job.company or "-",
                str(ranked.match.score),
                f"{ranked.match.must_have_coverage_pct:.0f}",
                ranked.match.recommendation,
            )
        console.print(table)

    for tailored in output.tailored_outputs:
        report = tailored.guard_report
        verdict_color = "green" if report.passed else "yellow"
        console.print(
            f"[{verdict_color}]Tailored {tailored.job_id}: guard {report.verdict} "
            f"(confidence {report.confidence:.2f}, {len(report.issues)} issue(s))[/{verdict_color}]"
        )
        for placeholder in report.requires_user_confirmation:
            console.print(f"  - confirm: {placeholder}")

    if output.notes_for_ui:
        console.print("\n[yellow]Notes:[/yellow]")
        for note in output.notes_for_ui:
            console.print(f"  - {note}")


def job_ids(paths: list[Path]) -> list[str]:
    """One id per job file: the file stem, suffixed with its position when stems repeat."""
    ids: list[str] = []
    for i, path in enumerate(paths, start=1):
        ids.append(path.stem if path.stem not in ids else f"{path.stem}-{i}")
    return ids


def _load_cache(path: Path) -> RunCache:
    try:
        return RunCache.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        console.print(f"[red]Invalid cache file {path}: {exc.error_count()} error(s)[/red]")
        raise typer.Exit(1) from exc


def _save_cache(path: Path, output: RunOutput, previous: RunCache) -> None:
    """Write the structures this run used so a later run can skip parsing them."""
    jobs_by_id = dict(previous.jobs_by_id)
    jobs_by_id.update({ranked.job_id: ranked.job for ranked in output.ranked_jobs})
    cache = RunCache(resume=output.resume or previous.resume, jobs_by_id=jobs_by_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(cache.model_dump_json(indent=2), encoding="utf-8")
    console.print(f"[green]Cache saved: {path}[/green]")


@app.command()
def run(
    resume: Path = typer.Argument(help="Resume file (PDF/DOCX/TXT/MD)"),
    job: list[Path] = typer.Option([], "--job", "-j", help="Job posting file, repeatable"),
    run_type: RunTypeOption = typer.Option(RunTypeOption.job_match, "--type", "-t", help="How far to run"),
    max_jobs: int = typer.Option(None, "--max-jobs", min=1, max=50, help="Jobs to parse and score"),
    max_tailored: int = typer.Option(None, "--max-tailored", min=1, max=10, help="Jobs to tailor"),
    budget: int = typer.Option(None, "--budget", min=1000, help="Total token budget"),
    location: str = typer.Option(None, "--location", help="Candidate location hint"),
    role: list[str] = typer.Option([], "--role", help="Target role hint, repeatable"),
    work_auth: str = typer.Option(None, "--work-auth", help="Work authorization hint"),
    cache: Path = typer.Option(None, "--cache", help="Reuse parsed resume/jobs from this JSON file"),
    save_cache: Path = typer.Option(None, "--save-cache", help="Write parsed resume/jobs here for reuse"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the run output JSON here"),
    stand_in: bool = typer.Option(False, "--stand-in", help="Canned output, no model calls"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Parse a resume, match it against job postings and optionally tailor applications."""
    _setup_logging(verbose)
    for path in [resume, *job, *([cache] if cache else [])]:
        if not path.exists():
            console.print(f"[red]File not found: {path}[/red]")
            raise typer.Exit(1)

    config = load_config()
    stand_in = stand_in or config.pipeline.stand_in
    run_id = str(uuid.uuid4())
    token_budget = budget or config.limits.token_budget_total
    run_cache = _load_cache(cache) if cache else RunCache()

    blocked = precheck(run_type, len(job), budget, config, stand_in)
    if blocked is not None:
        error, reason = blocked
        result = RunOutput.blocked(run_id, error, token_budget_total=token_budget, stopped_reason=reason)
    else:
        hints = None
        if location or role or work_auth:
            hints = CandidateHints(location=location, target_roles=role, work_auth=work_auth)
        run_input = RunInput(
            run_type=RunType(run_type.value),
            resume_text=load_document(resume),
            candidate_hints=hints,
            jobs=[
                JobInput(job_id=job_id, source="internal", raw_text=load_document(path))
                for job_id, path in zip(job_ids(job), job)
            ],
            limits=RunLimits(
                max_jobs=max_jobs,
                max_tailored_jobs=max_tailored,
                token_budget_total=budget,
            ),
            run_id=run_id,
            cache=run_cache,
        )
        result = _execute(run_input, config, stand_in, token_budget)

    _print_output(result)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.model_dump_json(indent=2), encoding="utf-8")
        console.print(f"\n[green]Output saved: {output}[/green]")
    if save_cache is not None and result.status != "blocked":
        _save_cache(save_cache, result, run_cache)
    if result.status == "blocked":
        raise typer.Exit(2)


def _execute(run_input: RunInput, config: AppConfig, stand_in: bool, token_budget: int) -> RunOutput:
    llm = LLMClient(
        timeout=config.llm.timeout,
        fast_model=config.llm.fast_model,
        quality_model=config.llm.quality_model,
    )
    store = RunStore(config.history.resolved_db_path) if config.history.enabled else None
    orchestrator = RunOrchestrator(
        llm,
        limits=config.limits,
        guardrails=config.guardrails,
        stand_in=stand_in,
        recorder=store,
        run_timeout=config.pipeline.run_timeout,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task(f"Running {run_input.run_type.value}...", total=None)
        try:
            result = asyncio.run(orchestrator.run(run_input))
        except Exception as exc:
            logging.getLogger(__name__).debug("Run failed", exc_info=True)
            if isinstance(exc, OrchestratorError):
                error, reason = str(exc), "run_failed"
            else:
                error, reason = f"Orchestrator run failed: {exc}", "internal_error"
            # Calls made before the failure still spent tokens
            usage = llm.get_token_summary()
            result = RunOutput.blocked(
                run_input.run_id,
                error,
                token_budget_total=token_budget,
                token_used_estimate=usage["input"] + usage["output"],
                stopped_reason=reason,
            )
            _store_cost(store, result.run_id, usage["cost_usd"])
            return result

    if not stand_in:
        _store_cost(store, result.run_id, llm.get_token_summary()["cost_usd"])
    return result


def _store_cost(store: RunStore | None, run_id: str, cost: float) -> None:
    if store is None:
        return
    store.set_cost(run_id, cost)
    console.print(f"[dim]Estimated cost: ${cost:.4f}[/dim]")


@app.command()
def history(
    limit: int = typer.Option(10, "--limit", "-n", min=1, max=50, help="Runs to show"),
) -> None:
    """Show recent runs from the audit log."""
    config = load_config()
    store = RunStore(config.history.resolved_db_path)
    runs = store.get_runs(limit=limit)
    if not runs:
        console.print("[dim]No runs recorded yet.[/dim]")
        return

    table = Table(title="Recent runs")
    table.add_column("Run ID")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Tokens", justify="right")
    table.add_column("Cost (USD)", justify="right")
    table.add_column("Started")
    for record in runs:
        table.add_row(
            record.run_id,
            record.run_type,
            record.status,
            f"{record.token_budget_used}/{record.token_budget_total}",
            f"{record.estimated_cost_usd:.4f}",
            record.started_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command()
def show(
    run_id: str = typer.Argument(help="Run ID from `history`"),
    materials: bool = typer.Option(False, "--materials", "-m", help="Print tailored resumes and cover letters"),
) -> None:
    """Show the recorded jobs of one run, with guard issues and optional application materials."""
    config = load_config()
    store = RunStore(config.history.resolved_db_path)
    record = store.get_run(run_id)
    if record is None:
        console.print(f"[red]Run not found: {run_id}[/red]")
        raise typer.Exit(1)

    console.print(Panel(
        f"Type: {record.run_type} | Status: {record.status}\n"
        f"Tokens: {record.token_budget_used}/{record.token_budget_total}"
        + (f"\nError: {record.error_message}" if record.error_message else ""),
        title=f"Run {record.run_id}",
    ))
    jobs = store.get_run_jobs(run_id)
    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Job")
    table.add_column("Score", justify="right")
    table.add_column("Must-have %", justify="right")
    table.add_column("Guard")
    for job in jobs:
        table.add_row(
            str(job.job_index + 1),
            job.job_title or job.job_id,
            str(job.score) if job.score is not None else "-",
            f"{job.must_have_pct:.0f}" if job.must_have_pct is not None else "-",
            job.guard_verdict or "-",
        )
    console.print(table)
    for note in record.notes:
        console.print(f"  - {note}")

    for job in jobs:
        if job.guard_report is not None:
            for issue in job.guard_report.issues:
                console.print(
                    f"[yellow]{job.job_id}: {issue.severity} {issue.type} in {issue.field}: "
                    f"{issue.fabricated_value}[/yellow]"
                )
        if materials and job.tailored_resume is not None:
            console.print(Panel(job.tailored_resume.summary, title=f"Tailored resume summary: {job.job_id}"))
        if materials and job.cover_letter is not None:
            letter = job.cover_letter
            console.print(Panel(
                f"{letter.salutation}\n\n{letter.body}\n\n{letter.closing}",
                title=letter.subject_line,
            ))


if __name__ == "__main__":
    app()
