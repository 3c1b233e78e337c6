import dataclasses
import logging
import pathlib

from pocodegen import codegen, parser, shell
from pocodegen.classes import CommandResult, DeployReport, LocaleReport, Settings

logger = logging.getLogger(__name__)

XGETTEXT_FLAGS = ["--from-code=UTF-8", "--debug", "-k", "-ktr:1", "-ktrc:1c,2", "-ktrf:1"]
MSGMERGE_FLAGS = ["--force-po", "--no-wrap"]


def locale_from_filename(po_filename: str) -> str:
    name = pathlib.Path(po_filename).name
    if name.endswith(".po"):
        name = name[: -len(".po")]
    return name.replace("_", "-")


def output_dir(src: str | pathlib.Path, ns: str) -> pathlib.Path:
    path_from_ns = ns.replace(".", "/").replace("-", "_")
    return pathlib.Path(src) / path_from_ns


def po_path(settings: Settings, po_file: str) -> pathlib.Path:
    return (settings.podir / po_file).absolute()


def expand_settings(settings: Settings) -> Settings:
    podir = pathlib.Path(settings.po) if settings.po else None
    output_path = output_dir(settings.src, settings.ns) if settings.src else None
    return dataclasses.replace(
        settings,
        srcdir=pathlib.Path(settings.src) if settings.src else None,
        podir=podir,
        output_path=output_path,
        outdir=output_path,
        messages_pot=(podir / "messages.pot").absolute() if podir else None,
    )


def gettext_missing(settings: Settings) -> Settings | None:
    if shell.which("xgettext") is None or shell.which("msgmerge") is None:
        logger.error("Could not find xgettext or msgmerge on PATH")
        return None
    return settings


def verify_po_folders(settings: Settings) -> Settings | None:
    podir = settings.podir
    if podir is None:
        logger.error("No PO directory configured")
        return None
    if not podir.exists():
        logger.info(f"Creating missing PO directory: {podir.absolute()}")
        podir.mkdir(parents=True)
        return settings
    if not podir.is_dir():
        logger.error("po-folder must be a directory.")
        return None
    return settings


def verify_source_folders(settings: Settings) -> Settings | None:
    srcdir, outdir = settings.srcdir, settings.outdir
    if srcdir is None or not srcdir.exists():
        logger.error("The given source-folder does not exist")
        return None
    if not outdir.exists():
        logger.info(f"Making missing source folder {outdir.absolute()}")
        outdir.mkdir(parents=True)
    return settings


def find_po_files(settings: Settings) -> Settings:
    names = sorted(
        path.name
        for path in settings.podir.iterdir()
        if path.is_file() and path.name.endswith(".po")
    )
    logger.debug(f"Found {len(names)} PO files in {settings.podir}")
    return dataclasses.replace(settings, existing_po_files=names)


def _prepare(settings: Settings, steps) -> Settings | None:
    settings = expand_settings(settings)
    for step in steps:
        settings = step(settings)
        if settings is None:
            return None
    return settings


def extract_strings(settings: Settings) -> list[CommandResult] | None:
    """Extract strings from a compiled, whitespace optimized JS file.

    Writes ``messages.pot`` into the PO directory with ``xgettext`` and then
    updates every existing PO file against it with ``msgmerge``. Returns the
    command results, or None when nothing was run.
    """
    if not settings.js_path:
        logger.error("No compiled javascript path given")
        return None
    if not pathlib.Path(settings.js_path).is_file():
        logger.error(f"Compiled javascript not found: {settings.js_path}")
        return None

    settings = _prepare(settings, [gettext_missing, verify_po_folders, find_po_files])
    if settings is None:
        return None

    logger.info("Extracting strings")
    pot = str(settings.messages_pot)
    results = [
        shell.run(
            "xgettext", *XGETTEXT_FLAGS, "-o", pot, settings.js_path,
            timeout=settings.timeout,
        )
    ]
    if not results[0].ok:
        logger.error("Extraction failed, not merging existing translations")
        return results

    for po in settings.existing_po_files:
        path = po_path(settings, po)
        if path.exists():
            logger.info(f"Merging extracted PO template file to existing translations for {po}")
            results.append(
                shell.run(
                    "msgmerge", *MSGMERGE_FLAGS, "-U", str(path), pot,
                    timeout=settings.timeout,
                )
            )
    return results


def deploy_translations(settings: Settings) -> DeployReport | None:
    """Generate one translation module per PO file.

    Existing generated files are overwritten. Returns a report of what was
    written, or None when the folders could not be prepared.
    """
    ext = codegen.extension(settings.output_format)
    settings = _prepare(
        settings, [verify_po_folders, verify_source_folders, find_po_files]
    )
    if settings is None:
        return None

    logger.info(f"po path is: {settings.po}")
    logger.info(f"Output path is: {settings.output_path}")

    if settings.output_format == "python":
        init_file = settings.output_path / "__init__.py"
        if not init_file.exists():
            init_file.write_text("", encoding="utf-8")

    report = DeployReport(settings.podir, settings.output_path)
    for po in settings.existing_po_files:
        locale = locale_from_filename(po)
        table, diagnostics = parser.read_translations(
            po_path(settings, po), settings.fallback_to_msgid
        )
        source = codegen.render(locale, table, settings.ns, settings.output_format)
        target = settings.output_path / f"{codegen.module_name(locale)}{ext}"
        logger.info(f"Writing {target}")
        target.write_text(source, encoding="utf-8")
        if diagnostics:
            logger.warning(f"{po}: {len(diagnostics)} warnings")
        report.locales.append(
            LocaleReport(locale, po_path(settings, po), target, len(table), diagnostics)
        )

    logger.info("Deployed translations.")
    return report
