# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Sessionfly CLI — run the service and generate keys."""

from __future__ import annotations

import secrets
from pathlib import Path

import click
from cryptography.fernet import Fernet

from sessionfly.cli.console import console, print_banner
from sessionfly.config.properties.server import ServerProperties
from sessionfly.core.config import Config
from sessionfly.kernel.exceptions import ConfigurationException

DEFAULT_CONFIG_FILE = "sessionfly.yaml"


class SessionflyCLI(click.Group):
    """Click group that shows the banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=SessionflyCLI)
@click.version_option(package_name="sessionfly")
def cli() -> None:
    """Sessionfly — signed-cookie session service."""


@cli.command("run")
@click.option("--host", default=None, help="Bind address (default: sessionfly.server.host).")
@click.option("--port", default=None, type=int, help="Port number (default: sessionfly.server.port).")
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILE,
    type=click.Path(dir_okay=False, path_type=Path),
    show_default=True,
    help="YAML or TOML configuration file; skipped when missing.",
)
@click.option("--profile", "profiles", multiple=True, help="Profile overlay to apply (repeatable).")
def run_command(host: str | None, port: int | None, config_path: Path, profiles: tuple[str, ...]) -> None:
    """Start the application under uvicorn."""
    import uvicorn

    from sessionfly.web.app import create_app

    try:
        config = Config.from_file(config_path, active_profiles=list(profiles))
        server = config.bind(ServerProperties)
        app = create_app(config)
    except ConfigurationException as exc:
        console.print(str(exc), style="error", markup=False)
        if exc.code == "MISSING_SECRET_KEY":
            console.print("[dim]Set SESSIONFLY_SECRET_KEY or sessionfly.session.secret-key.[/dim]")
        raise SystemExit(1) from None

    for source in config.loaded_sources:
        console.print(f"  [dim]config:[/dim] {source}")

    uvicorn.run(app, host=host or server.host, port=port or server.port, log_level="warning")


@cli.command("secret")
def secret_command() -> None:
    """Print a fresh signing secret and Fernet encryption key."""
    console.print(f"[info]secret-key:[/info]     {secrets.token_urlsafe(32)}")
    console.print(f"[info]encryption-key:[/info] {Fernet.generate_key().decode('ascii')}")


def main() -> None:
    cli()
