import dataclasses
import logging
import os
import sys
from typing import Any

import yaml

import click
from pocodegen import codegen, deploy
from pocodegen.classes import Settings

logger = logging.getLogger(__name__)

DEFAULT_LOGGING = {
    "level": "INFO",
    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    "datefmt": "%Y-%m-%d %H:%M:%S",
}


def load_config(config_folder: str) -> dict[str, Any]:
    config_folder_path = os.path.abspath(config_folder)
    config_file_path = os.path.join(config_folder_path, "config.yml")

    config: dict[str, Any] = {}
    try:
        with open(config_file_path, "r", encoding="utf-8") as file:
            config = yaml.safe_load(file) or {}
    except FileNotFoundError:
        logger.warning(f"Config file {config_file_path} not found, using defaults.")
    except yaml.YAMLError as exc:
        logger.error(f"Invalid config file {config_file_path}: {exc}")
        sys.exit(1)

    logging_cfg = {**DEFAULT_LOGGING, **(config.get("logging") or {})}
    logging.basicConfig(
        level=logging.getLevelName(logging_cfg["level"]),
        format=logging_cfg["format"],
        datefmt=logging_cfg["datefmt"],
    )
    return config.get("gettext") or {}


def build_settings(config: dict[str, Any], **overrides: Any) -> Settings:
    names = {f.name for f in dataclasses.fields(Settings)}
    values = {k: v for k, v in config.items() if k in names}
    values.update({k: v for k, v in overrides.items() if v is not None})
    settings = Settings(**values)
    if settings.output_format not in codegen.RENDERERS:
        logger.error(
            f"Unknown output format {settings.output_format!r}, "
            f"expected one of: {', '.join(codegen.RENDERERS)}"
        )
        sys.exit(1)
    return settings


@click.group()
@click.version_option(package_name="po-codegen")
def cli() -> None:
    pass


@cli.command("extract")
@click.option("--config-folder", default="config", help="Configuration folder path.")
@click.option("--js-path", help="Compiled, whitespace optimized javascript file.")
@click.option("--po", help="Directory holding messages.pot and the PO files.")
@click.option("--timeout", type=float, help="Seconds to wait for each gettext tool.")
def extract(
    config_folder: str, js_path: str | None, po: str | None, timeout: float | None
) -> None:
    """Extract strings into messages.pot and merge them into existing PO files."""
    settings = build_settings(
        load_config(config_folder), js_path=js_path, po=po, timeout=timeout
    )
    results = deploy.extract_strings(settings)
    if results is None or not all(result.ok for result in results):
        sys.exit(1)


@cli.command("deploy")
@click.option("--config-folder", default="config", help="Configuration folder path.")
@click.option("--src", help="Source folder the translations are written under.")
@click.option("--ns", help="Namespace (package) of the generated translations.")
@click.option("--po", help="Directory holding the PO files.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["python", "cljc"]),
    help="Generated source format.",
)
@click.option(
    "--fallback/--no-fallback",
    "fallback_to_msgid",
    default=None,
    help="Use the msgid when a translation is missing.",
)
@click.option("--strict", is_flag=True, help="Fail when any warning was reported.")
def deploy_command(
    config_folder: str,
    src: str | None,
    ns: str | None,
    po: str | None,
    output_format: str | None,
    fallback_to_msgid: bool | None,
    strict: bool,
) -> None:
    """Generate translation modules from the PO files."""
    settings = build_settings(
        load_config(config_folder),
        src=src,
        ns=ns,
        po=po,
        output_format=output_format,
        fallback_to_msgid=fallback_to_msgid,
    )
    report = deploy.deploy_translations(settings)
    if report is None:
        sys.exit(1)

    for locale in report.locales:
        for diagnostic in locale.diagnostics:
            click.echo(f"{locale.po_file.name}: {diagnostic}", err=True)
    click.echo(f"Deployed {len(report.locales)} locales to {report.output_path}")
    if strict and report.diagnostics:
        sys.exit(1)
