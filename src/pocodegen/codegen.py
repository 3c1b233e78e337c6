import logging
import pprint
from typing import Callable

from pocodegen.classes import TranslationTable

logger = logging.getLogger(__name__)

GENERATED_COMMENT = "This file was generated by pocodegen. Do not edit."

CLJ_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def module_name(locale: str) -> str:
    return locale.replace("-", "_")


def render_python(locale: str, table: TranslationTable, ns: str) -> str:
    module = f"{module_name(ns)}.{module_name(locale)}"
    translations = pprint.pformat(table, width=88, sort_dicts=True)
    return "\n".join(
        [
            f'"""Translations for the {locale} locale ({module})."""',
            f"# {GENERATED_COMMENT}",
            "from pocodegen.registry import TranslationRegistry",
            "",
            f"LOCALE = {locale!r}",
            "",
            f"TRANSLATIONS = {translations}",
            "",
            "",
            "def register(registry: TranslationRegistry) -> None:",
            "    registry.register(LOCALE, TRANSLATIONS)",
            "",
        ]
    )


def clj_string(value: str) -> str:
    return '"' + "".join(CLJ_ESCAPES.get(c, c) for c in value) + '"'


def render_cljc(locale: str, table: TranslationTable, ns: str) -> str:
    pairs = [f"{clj_string(k)} {clj_string(table[k])}" for k in sorted(table)]
    translations = "{" + ",\n  ".join(pairs) + "}"
    return (
        "\n\n".join(
            [
                f"(ns {ns}.{locale} (:require fulcro.i18n))",
                f";; {GENERATED_COMMENT}",
                f"(def translations\n {translations})",
                f"(swap! fulcro.i18n/*loaded-translations* assoc :{locale} translations)",
            ]
        )
        + "\n"
    )


RENDERERS: dict[str, tuple[Callable[[str, TranslationTable, str], str], str]] = {
    "python": (render_python, ".py"),
    "cljc": (render_cljc, ".cljc"),
}


def get_renderer(
    output_format: str,
) -> tuple[Callable[[str, TranslationTable, str], str], str]:
    if output_format not in RENDERERS:
        raise ValueError(f"Unknown output format: {output_format}")
    return RENDERERS[output_format]


def extension(output_format: str) -> str:
    return get_renderer(output_format)[1]


def render(
    locale: str, table: TranslationTable, ns: str, output_format: str = "python"
) -> str:
    renderer, _ = get_renderer(output_format)
    logger.debug(f"Rendering {len(table)} translations for {locale} as {output_format}")
    return renderer(locale, table, ns)
