# Copyright 2025 iGenius S.p.A
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

import logging
from pathlib import Path
import sys
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
import typer
from typing_extensions import Annotated
import yaml

from procform.cli.tables import render_resources, summary_rows
from procform.config.settings import get_settings
from procform.config.template import TemplateConfig
from procform.exceptions import ProcformError
from procform.helpers.logger import set_level, setup_logger
from procform.models.app import Application, load_application
from procform.platform.route53 import lookup_hosted_zone
from procform.template.builder import TemplateBuilder
from procform.template.serializer import OutputFormat
from procform.utils.version import get_version

app = typer.Typer(name="procform CLI", no_args_is_help=True)

console = Console()
logger = setup_logger("procform.cli", level=logging.INFO)

# Input problems are reported, not raised.
_USER_ERRORS = (ProcformError, ValidationError, yaml.YAMLError, ValueError, OSError)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "-c",
        "--config",
        help="Path to the YAML template configuration. Defaults to PROCFORM_CONFIG_FILE.",
    ),
]
AppOption = Annotated[
    Path,
    typer.Option(..., "-a", "--app", help="Path to the YAML/JSON application description"),
]
HostedZoneOption = Annotated[
    Optional[str],
    typer.Option(
        "--hosted-zone-id",
        help="Look up this Route53 zone and use it instead of the configured one.",
    ),
]


@app.callback()
def main(
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Override PROCFORM_LOG_LEVEL"),
    ] = None,
):
    try:
        set_level(log_level or get_settings().log_level)
    except ValueError as e:
        raise _fail(e) from e


def _load(
    config: Path | None, app_file: Path, hosted_zone_id: str | None
) -> tuple[TemplateBuilder, Application]:
    settings = get_settings()
    config_path = config or settings.config_file
    if config_path is None or not Path(config_path).is_file():
        raise ProcformError(f"Template configuration not found: {config_path}")

    cfg = TemplateConfig.read(config_path)
    if hosted_zone_id:
        zone = lookup_hosted_zone(hosted_zone_id, region=settings.aws_region)
        cfg = cfg.model_copy(update={"hosted_zone": zone})

    return TemplateBuilder(cfg), load_application(app_file)


def _fail(e: Exception) -> typer.Exit:
    logger.error(f"[red1]{type(e).__name__}[/red1]: {e}")
    return typer.Exit(code=1)


@app.command("version", short_help="Show the version of the procform CLI")
def version(short: bool = False):
    v = get_version()
    print(v if short else f"procform CLI Version: {v}")
    raise typer.Exit()


@app.command("render", short_help="Compile an application into a stack template")
def render(
    app_file: AppOption,
    config: ConfigOption = None,
    fmt: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format", case_sensitive=False),
    ] = OutputFormat.JSON,
    sort_keys: Annotated[
        bool,
        typer.Option("--sort-keys/--no-sort-keys", help="Emit mapping keys in sorted order"),
    ] = False,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Write to this file instead of stdout"),
    ] = None,
    hosted_zone_id: HostedZoneOption = None,
):
    """
    Build the Parameters/Resources/Outputs document for an application.

    Nothing is written when the build fails.
    """
    try:
        builder, application = _load(config, app_file, hosted_zone_id)
        if output is None:
            builder.execute(application, sys.stdout, fmt, sort_keys=sort_keys)
            return
        raw = builder.render(application, fmt, sort_keys=sort_keys)
        output.write_text(raw if raw.endswith("\n") else raw + "\n")
    except _USER_ERRORS as e:
        raise _fail(e) from e

    logger.info(f"Template for [cyan]{application.name}[/cyan] written to {output}")


@app.command("describe", short_help="List the resources an application compiles to")
def describe(
    app_file: AppOption,
    config: ConfigOption = None,
    hosted_zone_id: HostedZoneOption = None,
    process_type: Annotated[
        Optional[str],
        typer.Option("-p", "--process", help="Only list the resources of this process"),
    ] = None,
):
    try:
        builder, application = _load(config, app_file, hosted_zone_id)
        graph = builder.build(application)
        title = application.name
        if process_type is not None:
            process = application.process(process_type)
            if process is None:
                raise ProcformError(
                    f"Application '{application.name}' has no process '{process_type}'"
                )
            graph = graph.owned_by(process.type)
            title = f"{application.name} / {process.type}"
    except _USER_ERRORS as e:
        raise _fail(e) from e

    render_resources(graph, title=title, console=console)
    counts = ", ".join(f"{n} x {t}" for t, n in summary_rows(graph))
    console.print(f"[bold]{len(graph)} resources[/bold]: {counts}")


if __name__ == "__main__":
    app()
