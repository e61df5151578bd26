"""
Command-line interface for feedback-hub.

Provides commands to initialize the database, run the API server,
and run diagnostic checks.

Usage:
    feedback-hub init-db          # Create the feedback_collections table
    feedback-hub serve            # Run the API server
    feedback-hub health           # Check database connectivity
    feedback-hub generate-secret  # Print a value for ADMIN_SECRET
"""

import asyncio
import os
import secrets
import sys

import click

from feedback_hub.config.settings import get_settings
from feedback_hub.observability.logging import setup_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Feedback Hub - Feedback collection registry."""
    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command("init-db")
def init_db() -> None:
    """Initialize the database schema."""
    from feedback_hub.feedback.repository import FeedbackCollectionRepository
    from feedback_hub.storage.database import Database

    async def run():
        db = Database()
        await db.connect()

        try:
            repo = FeedbackCollectionRepository(db)
            await repo.create_table()
            click.echo("Database initialized successfully")
        finally:
            await db.close()

    asyncio.run(run())


@main.command()
def health() -> None:
    """Check health of the database and admin configuration."""
    import structlog
    logger = structlog.get_logger()

    async def check():
        from feedback_hub.storage.database import Database

        results: dict[str, bool] = {}

        try:
            db = Database()
            await db.connect()
            results["postgres"] = await db.health_check()
            await db.close()
        except Exception as e:
            results["postgres"] = False
            logger.error("Postgres health check failed", error=str(e))

        results["admin_secret_configured"] = get_settings().admin_auth_configured

        click.echo("\nHealth Check Results:")
        click.echo("-" * 40)

        for name, status in results.items():
            icon = "✓" if status else "✗"
            color = "green" if status else "red"
            click.echo(click.style(f"  {icon} {name}: {status}", fg=color))

        click.echo("-" * 40)

        if results["postgres"]:
            click.echo(click.style("All core services healthy!", fg="green"))
            sys.exit(0)
        else:
            click.echo(click.style("Some services unhealthy!", fg="red"))
            sys.exit(1)

    asyncio.run(check())


@main.command()
@click.option("--host", default=None, help="Bind address (defaults to API_HOST)")
@click.option("--port", default=None, type=int, help="Bind port (defaults to API_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the feedback-hub API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    if not settings.admin_auth_configured:
        click.echo(
            click.style(
                "Warning: ADMIN_SECRET is not set; admin endpoints will reject all requests",
                fg="yellow",
            )
        )

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "feedback_hub.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@main.command("generate-secret")
@click.option("--bytes", "num_bytes", default=32, show_default=True, help="Random bytes")
def generate_secret(num_bytes: int) -> None:
    """Print a random hex value suitable for ADMIN_SECRET."""
    click.echo(secrets.token_hex(num_bytes))


if __name__ == "__main__":
    main()
