"""CLI commands for certificate generation and dispatch."""

import asyncio
from uuid import UUID

import typer
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from src.certificates.activity_logger import record_step_run
from src.certificates.dependencies import (
    build_dispatch_step,
    build_generation_step,
    build_recurring_trigger,
    get_activity_logger,
)
from src.certificates.dtos import StepResult, TriggerResult
from src.certificates.scheduling.jobs import DISPATCH_JOB_ID, GENERATION_JOB_ID
from src.config.logging import setup_logging
from src.config.settings import settings

app = typer.Typer(help="CLI commands for certificate generation and dispatch")


def _print_step_result(result: StepResult) -> None:
    color = typer.colors.GREEN if result.success else typer.colors.RED
    typer.secho(result.message, fg=color)
    if result.scheduled:
        return
    typer.secho(
        f"  Total: {result.total}  Successful: {result.successful}  Failed: {result.failed}",
        fg=typer.colors.BLUE,
    )
    for outcome in result.results:
        if outcome.success:
            typer.secho(f"  ok    {outcome.participant_name}", fg=typer.colors.CYAN)
        else:
            typer.secho(f"  fail  {outcome.participant_name}: {outcome.error}", fg=typer.colors.RED)


def _print_trigger_result(result: TriggerResult) -> None:
    if result.waiting:
        typer.secho(f"{result.message}. Use --force to run now.", fg=typer.colors.YELLOW)
        return
    color = typer.colors.GREEN if result.success else typer.colors.RED
    typer.secho(result.message, fg=color)
    typer.secho(
        f"  Processed: {result.total_processed}  Successful: {result.total_successful}  "
        f"Failed: {result.total_failed}",
        fg=typer.colors.BLUE,
    )
    for event_id, step_result in result.event_results.items():
        typer.secho(
            f"  {event_id}: {step_result.message} ({step_result.successful}/{step_result.total})",
            fg=typer.colors.CYAN if step_result.success else typer.colors.RED,
        )


async def _generate(event_id: UUID, participant_ids: list[UUID]) -> StepResult:
    result = await build_generation_step().generate(event_id, participant_ids=participant_ids or None)
    await record_step_run(get_activity_logger(), "manual_certificate_generation", event_id, result)
    return result


async def _send(event_id: UUID) -> StepResult:
    result = await build_dispatch_step().dispatch(event_id)
    await record_step_run(get_activity_logger(), "manual_certificate_sending", event_id, result)
    return result


@app.command()
def generate(
    event_id: UUID = typer.Argument(..., help="Event UUID"),
    participants: list[UUID] = typer.Option(
        [],
        "--participant",
        "-p",
        help="Only generate for these participant UUIDs",
    ),
):
    """Generate missing certificates for one event."""
    setup_logging()
    result = asyncio.run(_generate(event_id, participants))
    _print_step_result(result)
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def send(event_id: UUID = typer.Argument(..., help="Event UUID")):
    """E-mail generated but unsent certificates for one event."""
    setup_logging()
    result = asyncio.run(_send(event_id))
    _print_step_result(result)
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def run_generation(
    force: bool = typer.Option(False, "--force", "-f", help="Ignore the daily generation time"),
):
    """Run the daily generation over today's events, as the scheduler would."""
    setup_logging()
    result = asyncio.run(build_recurring_trigger().fire_generation(force=force))
    _print_trigger_result(result)
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def run_dispatch(
    force: bool = typer.Option(False, "--force", "-f", help="Ignore the daily send time"),
):
    """Run the daily dispatch over today's events, as the scheduler would."""
    setup_logging()
    result = asyncio.run(build_recurring_trigger().fire_dispatch(force=force))
    _print_trigger_result(result)
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def next_runs():
    """Show when the daily generation and sending will run next."""
    runs = build_recurring_trigger().next_runs()
    typer.secho(f"Timezone: {settings.scheduler_timezone}", fg=typer.colors.BLUE)
    typer.secho(f"  Generation: {runs[GENERATION_JOB_ID].isoformat()}", fg=typer.colors.CYAN)
    typer.secho(f"  Sending:    {runs[DISPATCH_JOB_ID].isoformat()}", fg=typer.colors.CYAN)


async def _run_scheduler() -> None:
    scheduler = AsyncIOScheduler(timezone=settings.scheduler_timezone)
    build_recurring_trigger().register(
        scheduler, misfire_grace_time=settings.scheduler_misfire_grace_seconds
    )
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)


@app.command()
def run_scheduler():
    """Run the daily certificate scheduler in the foreground until interrupted."""
    setup_logging()
    typer.secho("Certificate scheduler running, press Ctrl+C to stop", fg=typer.colors.GREEN)
    try:
        asyncio.run(_run_scheduler())
    except KeyboardInterrupt:
        typer.secho("Scheduler stopped", fg=typer.colors.YELLOW)


if __name__ == "__main__":
    app()
