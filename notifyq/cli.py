"""CLI interface for notifyq."""

import click
import logging
import sys
from datetime import datetime, timedelta
from typing import Optional
from .handlers import build_registry
from .models import Config, JobState, JobType
from .queue import JobQueue


def get_config() -> Config:
    """Load configuration from the environment."""
    return Config()


def _sample_event() -> dict:
    return {
        "id": "evt-1",
        "name": "Spring Music Festival",
        "date": datetime(2026, 5, 20, 18, 30),
        "location": "Riverside Park",
        "description": "Open-air concert",
        "ticket_price": 45.0,
    }


def _sample_customer(n: int) -> dict:
    return {"id": f"cust-{n}", "email": f"customer{n}@example.com", "name": f"Customer {n}"}


@click.group()
def cli():
    """notifyq - in-process notification job queue"""
    pass


@cli.command()
@click.option("--bookings", default=2, help="Number of booking confirmations to enqueue")
@click.option("--fail", is_flag=True, help="Also enqueue a job with an unknown type")
@click.option("--timeout", default=30.0, help="Seconds to wait for the queue to drain")
def demo(bookings: int, fail: bool, timeout: float):
    """Enqueue sample notifications and process them.

    Example:
        notifyq demo --bookings 3 --fail
    """
    if bookings < 0:
        click.echo("✗ Bookings must be zero or more", err=True)
        sys.exit(1)

    config = get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )
    queue = JobQueue(build_registry(), config)

    event = _sample_event()
    customers = [_sample_customer(i + 1) for i in range(bookings)]
    for i, customer in enumerate(customers):
        booking = {"id": f"bkg-{i + 1}", "ticket_count": i + 1, "total_amount": event["ticket_price"] * (i + 1)}
        queue.enqueue(JobType.BOOKING_CONFIRMATION, {"booking": booking, "customer": customer, "event": event})

    if customers:
        updated = dict(event, location="City Hall", date=event["date"] + timedelta(days=1))
        queue.enqueue(
            JobType.EVENT_UPDATE_NOTIFICATION,
            {"event": updated, "customers": customers, "update_fields": ["location", "date"]},
        )

    if fail:
        queue.enqueue("SMS_REMINDER", {"to": "+10000000000"})

    if not queue.wait_idle(timeout):
        click.echo(f"✗ Queue did not drain within {timeout:g}s", err=True)
        sys.exit(1)

    _print_status(queue)
    _print_jobs(queue)


def _print_status(queue: JobQueue) -> None:
    stats = queue.get_stats()
    click.echo("\n" + "=" * 50)
    click.echo("notifyq Status")
    click.echo("=" * 50)
    click.echo(f"Total Jobs:     {stats['total']}")
    click.echo(f"  Pending:      {stats['pending']}")
    click.echo(f"  Processing:   {stats['processing']}")
    click.echo(f"  Completed:    {stats['completed']}")
    click.echo(f"  Failed:       {stats['failed']}")
    click.echo("=" * 50 + "\n")


def _print_jobs(queue: JobQueue, state: Optional[JobState] = None) -> None:
    jobs = queue.get_jobs_by_state(state) if state else queue.get_all_jobs()
    if not jobs:
        click.echo("No jobs found")
        return

    click.echo(f"{'ID':<38} {'Type':<28} {'State':<11} {'Error':<30}")
    click.echo("-" * 110)
    for job in jobs:
        error = (job.error_message or "")[:30]
        click.echo(f"{job.id:<38} {job.type:<28} {job.state.value:<11} {error:<30}")
    click.echo()


@cli.group()
def config():
    """Inspect configuration"""
    pass


@config.command()
def show():
    """Show the effective configuration.

    Example:
        NOTIFYQ_HANDLER_TIMEOUT=5 notifyq config show
    """
    cfg = get_config()
    timeout = f"{cfg.handler_timeout:g} seconds" if cfg.handler_timeout else "none"

    click.echo("\nCurrent Configuration:")
    click.echo(f"  processing-delay:  {cfg.processing_delay:g} seconds")
    click.echo(f"  handler-timeout:   {timeout}")
    click.echo(f"  log-level:         {cfg.log_level}")
    click.echo(f"  worker-name:       {cfg.worker_name}")
    click.echo()


if __name__ == "__main__":
    cli()
