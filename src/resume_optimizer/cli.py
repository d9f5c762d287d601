"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from resume_optimizer.config import load_config
from resume_optimizer.errors import ResumeOptimizerError
from resume_optimizer.logging.usage_store import UsageStore
from resume_optimizer.models.analysis import ResumeAnalysis
from resume_optimizer.models.resume import ResumeDocument
from resume_optimizer.session import EditorSession
from resume_optimizer.storage.session_store import SessionStore

app = typer.Typer(
    name="resume-optimizer",
    help="AI resume suggestions tailored to a job description",
    no_args_is_help=True,
)
console = Console()

_LEVEL_STYLES = {"success": "green", "info": "cyan", "warning": "yellow", "error": "red"}
_PRIORITY_STYLES = {"high": "red", "medium": "yellow", "low": "dim"}


def _print_notice(level: str, title: str, detail: str) -> None:
    style = _LEVEL_STYLES.get(level, "white")
    console.print(f"[{style}]{title}[/{style}]" + (f" [dim]{detail}[/dim]" if detail else ""))


def _open_session(api_key: str = "") -> EditorSession:
    config = load_config()
    store = SessionStore(
        db_path=config.storage.resolved_db_path,
        document_ttl_days=config.storage.document_ttl_days,
        ledger_ttl_days=config.storage.ledger_ttl_days,
    )
    session = EditorSession(
        store,
        config=config,
        api_key=api_key,
        usage_store=UsageStore(config.storage.resolved_usage_db_path),
        on_notice=_print_notice,
    )
    session.restore()
    return session


def _read_resume(path: Path) -> ResumeDocument:
    if not path.exists():
        console.print(f"[red]Resume file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return ResumeDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        console.print(f"[red]Invalid resume JSON: {exc}[/red]")
        raise typer.Exit(1)


def _read_analysis(path: Path) -> ResumeAnalysis:
    if not path.exists():
        console.print(f"[red]Analysis file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return ResumeAnalysis.model_validate_json(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        console.print(f"[red]Invalid analysis JSON: {exc}[/red]")
        raise typer.Exit(1)


def _write_analysis(analysis: ResumeAnalysis, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(analysis.model_dump_json(by_alias=True, indent=2), encoding="utf-8")


def _suggestion_table(analysis: ResumeAnalysis) -> Table:
    table = Table(title="Suggestions")
    table.add_column("#", justify="right")
    table.add_column("Priority")
    table.add_column("Section")
    table.add_column("Type")
    table.add_column("Title")
    for index, suggestion in enumerate(analysis.suggestions, start=1):
        style = _PRIORITY_STYLES[suggestion.priority.value]
        table.add_row(
            str(index),
            f"[{style}]{suggestion.priority.value}[/{style}]",
            suggestion.section.value,
            suggestion.type.value,
            suggestion.title,
        )
    return table


@app.command()
def analyze(
    jd: Path = typer.Option(..., "--jd", help="Job description text file"),
    resume: Path = typer.Option(None, "--resume", "-r", help="Resume JSON file (defaults to the saved resume)"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the analysis JSON here"),
    api_key: str = typer.Option(
        None, "--api-key", envvar="ANTHROPIC_API_KEY", help="Anthropic API key"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Analyze a resume against a job description."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    if not jd.exists():
        console.print(f"[red]Job description file not found: {jd}[/red]")
        raise typer.Exit(1)

    session = _open_session(api_key or "")
    if resume is not None:
        session.update_document(_read_resume(resume))
    session.job_description = jd.read_text(encoding="utf-8")

    with console.status("Analyzing resume..."):
        try:
            result = asyncio.run(session.optimize())
        except ResumeOptimizerError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(1)
        finally:
            session.flush()

    if result.degraded:
        console.print(Panel(result.audit_text, title="Basic analysis"))
        return

    analysis = result.analysis
    score_color = "green" if analysis.overall_score >= 75 else "yellow" if analysis.overall_score >= 60 else "red"
    console.print(
        Panel(
            f"[bold {score_color}]Score: {analysis.overall_score}[/bold {score_color}]\n"
            f"{analysis.summary}\n\n"
            f"Strengths: {', '.join(analysis.matching_strengths)}\n"
            f"Gaps: {', '.join(analysis.gaps)}",
            title="Analysis",
        )
    )
    console.print(_suggestion_table(analysis))

    if output is not None:
        _write_analysis(analysis, output)
        console.print(f"[green]Analysis saved: {output}[/green]")


@app.command()
def apply(
    analysis_file: Path = typer.Argument(help="Analysis JSON written by `analyze --output`"),
    number: int = typer.Argument(help="Suggestion number from the analysis table"),
    resume: Path = typer.Option(None, "--resume", "-r", help="Resume JSON file (defaults to the saved resume)"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the updated resume JSON here"),
) -> None:
    """Apply one suggestion to the resume."""
    analysis = _read_analysis(analysis_file)
    if not 1 <= number <= len(analysis.suggestions):
        console.print(f"[red]No suggestion #{number} (have {len(analysis.suggestions)})[/red]")
        raise typer.Exit(1)

    session = _open_session()
    if resume is not None:
        session.update_document(_read_resume(resume))
    changed = session.apply_suggestion(analysis.suggestions[number - 1])
    session.flush()

    if changed and output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(session.document.to_json(), encoding="utf-8")
        console.print(f"[green]Resume saved: {output}[/green]")


@app.command()
def done(
    analysis_file: Path = typer.Argument(help="Analysis JSON written by `analyze --output`"),
    number: int = typer.Argument(help="Suggestion number from the analysis table"),
) -> None:
    """Mark a suggestion as completed so later analyses skip it."""
    analysis = _read_analysis(analysis_file)
    if not 1 <= number <= len(analysis.suggestions):
        console.print(f"[red]No suggestion #{number} (have {len(analysis.suggestions)})[/red]")
        raise typer.Exit(1)

    session = _open_session()
    session.analysis = analysis
    session.mark_done(analysis.suggestions[number - 1])
    session.flush()
    _write_analysis(session.analysis, analysis_file)


@app.command()
def history(
    clear: bool = typer.Option(False, "--clear", help="Forget all completed suggestions"),
) -> None:
    """Show the completed-suggestions ledger."""
    session = _open_session()
    if clear:
        session.clear_completed()
        return

    if not session.completed:
        console.print("[yellow]No completed suggestions.[/yellow]")
        return

    table = Table(title="Completed suggestions")
    table.add_column("Completed")
    table.add_column("Section")
    table.add_column("Type")
    table.add_column("Title")
    for entry in session.completed:
        table.add_row(
            entry.completed_at.strftime("%Y-%m-%d %H:%M"),
            entry.section.value,
            entry.type.value,
            entry.title,
        )
    console.print(table)


@app.command()
def usage(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of recent runs to show"),
) -> None:
    """Show recent optimize runs and their estimated cost."""
    config = load_config()
    store = UsageStore(config.storage.resolved_usage_db_path)
    logs = store.get_logs(limit=limit)
    if not logs:
        console.print("[yellow]No optimize runs recorded.[/yellow]")
        return

    table = Table(title="Optimize runs")
    table.add_column("When")
    table.add_column("Mode")
    table.add_column("Model")
    table.add_column("Score", justify="right")
    table.add_column("Tokens", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Status")
    for log in logs:
        table.add_row(
            log.timestamp.strftime("%Y-%m-%d %H:%M"),
            log.mode,
            log.model or "-",
            "-" if log.overall_score is None else str(log.overall_score),
            f"{log.prompt_tokens:,} / {log.completion_tokens:,}",
            f"${log.estimated_cost_usd:.4f}",
            "[green]ok[/green]" if log.success else f"[red]{escape(log.error_message or 'failed')}[/red]",
        )
    console.print(table)
    console.print(f"Total estimated cost: [bold]${store.get_total_cost():.4f}[/bold]")


if __name__ == "__main__":
    app()
