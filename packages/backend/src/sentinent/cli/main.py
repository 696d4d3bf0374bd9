"""Sentinent CLI — run the API server and check its configuration.

Usage:
    sentinent check-config     # Validate secret + CORS origins, print the allow-set
    sentinent serve            # Run the API with uvicorn
"""

from __future__ import annotations

import sys
from datetime import timedelta
from typing import Optional

import click

from sentinent import __version__
from sentinent.auth.jwt import TokenService
from sentinent.config import Settings
from sentinent.errors import ConfigurationError
from sentinent.middleware.cors import OriginGatekeeper


def _load_settings() -> Settings:
    try:
        return Settings()
    except ValueError as e:
        click.secho(f"Invalid configuration: {e}", fg="red", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="sentinent")
def main():
    """Sentinent — multi-tenant decision records backend."""


@main.command("check-config")
def check_config():
    """Validate SENTINENT_* settings the same way startup does."""
    settings = _load_settings()
    try:
        TokenService(
            settings.jwt_secret,
            lifetime=timedelta(hours=settings.token_lifetime_hours),
        )
        gatekeeper = OriginGatekeeper(settings.cors_origin_list)
    except ConfigurationError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.secho("Configuration OK", fg="green", bold=True)
    click.echo(f"  environment:  {settings.environment}")
    click.echo(f"  secure cookie: {'yes' if settings.is_production else 'no'}")
    click.echo(f"  token lifetime: {settings.token_lifetime_hours}h")
    click.echo("  allowed origins:")
    for origin in sorted(gatekeeper.allowed_origins):
        click.echo(f"    {origin}")


@main.command()
@click.option("--host", default=None, help="Bind address (default: SENTINENT_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: SENTINENT_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes (dev only)")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    settings = _load_settings()
    uvicorn.run(
        "sentinent.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
