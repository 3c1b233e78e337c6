import logging
import pathlib
import re

from pocodegen.classes import Diagnostic, ParseResult, TranslationEntry, TranslationTable

logger = logging.getLogger(__name__)

HEADER_SIGNATURE = 'msgid ""\nmsgstr ""\n"Project-Id-V'

COMMENT_REGEX = re.compile(r"^#[^\n]*(?:\n|$)", re.MULTILINE)
KEYLINE_REGEX = re.compile(r'^(msgid|msgctxt|msgstr)\s+"(.*)"\s*$')
CONTINUATION_REGEX = re.compile(r'^\s*".*"\s*$')
ESCAPE_REGEX = re.compile(r"\\(.)")

ESCAPES = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}


def strip_comments(block: str) -> str:
    return COMMENT_REGEX.sub("", block)


def is_header(block: str) -> bool:
    return block.startswith(HEADER_SIGNATURE)


def strip_quotes(value: str) -> str:
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def unescape(value: str) -> str:
    return ESCAPE_REGEX.sub(lambda m: ESCAPES.get(m[1], m[0]), value)


def get_blocks(content: str) -> list[tuple[int, str]]:
    # Comments stay in the returned blocks so line numbers remain accurate
    if content.startswith("\ufeff"):
        content = content[1:]
    content = content.replace("\r\n", "\n").replace("\r", "\n")
    blocks: list[tuple[int, str]] = []
    lines: list[str] = []
    start = 1
    for number, line in enumerate(content.split("\n"), start=1):
        if line.strip():
            if not lines:
                start = number
            lines.append(line)
        elif lines:
            blocks.append((start, "\n".join(lines)))
            lines = []
    if lines:
        blocks.append((start, "\n".join(lines)))

    result = []
    for start, block in blocks:
        stripped = strip_comments(block)
        if not stripped.strip():
            continue
        if is_header(stripped):
            logger.debug(f"Skipping header block at line {start}")
            continue
        result.append((start, block))
    return result


def block_to_entry(
    block: str, first_line: int = 1
) -> tuple[TranslationEntry, list[Diagnostic]]:
    fields = {"msgctxt": "", "msgid": "", "msgstr": ""}
    diagnostics: list[Diagnostic] = []
    section = None
    for number, line in enumerate(block.split("\n"), start=first_line):
        if line.startswith("#") or not line.strip():
            continue

        if CONTINUATION_REGEX.match(line):
            if section is None:
                diagnostics.append(
                    Diagnostic(number, line, "Continuation line without a field")
                )
            else:
                fields[section] += unescape(strip_quotes(line))
            continue

        match = KEYLINE_REGEX.match(line)
        if match:
            section = match[1]
            fields[section] += unescape(match[2])
            continue

        # Anything after an unknown line must not extend the previous field
        section = None
        diagnostics.append(Diagnostic(number, line, "Unexpected input"))

    entry = TranslationEntry(
        msgctxt=fields["msgctxt"],
        msgid=fields["msgid"],
        msgstr=fields["msgstr"],
        line=first_line,
    )
    return entry, diagnostics


def parse_po(content: str) -> ParseResult:
    result = ParseResult()
    for start, block in get_blocks(content):
        entry, diagnostics = block_to_entry(block, start)
        result.entries.append(entry)
        result.diagnostics.extend(diagnostics)
    return result


def map_translations(
    entries: list[TranslationEntry], fallback_to_msgid: bool = True
) -> tuple[TranslationTable, list[Diagnostic]]:
    """Build the ``msgctxt|msgid`` lookup table for a list of entries.

    An entry with a blank msgstr and a non-blank msgid is untranslated. With
    ``fallback_to_msgid`` it maps to its own msgid, otherwise it is left out
    of the table. Either way a diagnostic is recorded.
    """
    table: TranslationTable = {}
    diagnostics: list[Diagnostic] = []
    for entry in entries:
        msg = entry.msgstr
        if not entry.msgstr.strip() and entry.msgid.strip():
            if not fallback_to_msgid:
                diagnostics.append(
                    Diagnostic(entry.line, entry.msgid, "Missing translation")
                )
                continue
            diagnostics.append(
                Diagnostic(
                    entry.line,
                    entry.msgid,
                    "Missing translation, using the default locale's message",
                )
            )
            msg = entry.msgid
        table[entry.key] = msg
    return table, diagnostics


def read_translations(
    path: str | pathlib.Path, fallback_to_msgid: bool = True
) -> tuple[TranslationTable, list[Diagnostic]]:
    path = pathlib.Path(path)
    logger.debug(f"Parsing {path}")
    result = parse_po(path.read_text("utf-8-sig"))
    table, diagnostics = map_translations(result.entries, fallback_to_msgid)
    return table, result.diagnostics + diagnostics
