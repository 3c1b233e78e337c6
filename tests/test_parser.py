"""Tests for the PO parser and translation table building."""

import pytest

from pocodegen.classes import TranslationEntry
from pocodegen.parser import (
    block_to_entry,
    get_blocks,
    is_header,
    map_translations,
    parse_po,
    read_translations,
    strip_comments,
    strip_quotes,
    unescape,
)

HEADER = '''# Translations for the demo app.
msgid ""
msgstr ""
"Project-Id-Version: demo 1.0\\n"
"Content-Type: text/plain; charset=UTF-8\\n"
'''

PO_CONTENT = HEADER + '''
#: src/foo.js:10
msgid "Hello"
msgstr "Hola"

msgctxt "menu"
msgid "File"
msgstr "Archivo"

msgid "Untranslated"
msgstr ""

msgid "Hello, "
"World!"
msgstr "Hola, "
"Mundo!"
'''


def _table(content, **kwargs):
    table, _ = map_translations(parse_po(content).entries, **kwargs)
    return table


class TestBlocks:
    def test_strip_comments(self):
        block = '#: src/foo.js:10\n#, fuzzy\nmsgid "X"\nmsgstr "Y"'
        assert strip_comments(block) == 'msgid "X"\nmsgstr "Y"'

    def test_header_detected_after_comments_removed(self):
        assert is_header(strip_comments(HEADER))
        assert not is_header('msgid "Hello"\nmsgstr ""')

    def test_header_block_is_dropped(self):
        blocks = get_blocks(PO_CONTENT)
        assert len(blocks) == 4
        assert all("Project-Id-Version" not in block for _, block in blocks)

    def test_block_start_lines(self):
        blocks = get_blocks('msgid "a"\nmsgstr "b"\n\n\nmsgid "c"\nmsgstr "d"\n')
        assert [start for start, _ in blocks] == [1, 5]

    def test_comment_only_block_is_dropped(self):
        assert get_blocks("# just a comment\n#~ obsolete\n") == []

    def test_windows_line_endings(self):
        content = 'msgid "a"\r\nmsgstr "b"\r\n\r\nmsgid "c"\r\nmsgstr "d"\r\n'
        assert _table(content) == {"|a": "b", "|c": "d"}


class TestBlockToEntry:
    def test_all_fields(self):
        entry, diagnostics = block_to_entry(
            'msgctxt "menu"\nmsgid "File"\nmsgstr "Archivo"'
        )
        assert entry == TranslationEntry("menu", "File", "Archivo")
        assert entry.key == "menu|File"
        assert diagnostics == []

    def test_missing_fields_default_to_empty(self):
        entry, _ = block_to_entry('msgid "Only id"')
        assert entry == TranslationEntry("", "Only id", "")

    def test_continuation_lines_concatenate_in_order(self):
        entry, _ = block_to_entry('msgid "Hello, "\n"World!"\nmsgstr ""\n"A"\n"B"')
        assert entry.msgid == "Hello, World!"
        assert entry.msgstr == "AB"

    def test_comment_line_does_not_change_result(self):
        with_comment, _ = block_to_entry('#: src/foo.js:10\nmsgid "X"\nmsgstr "Y"')
        without_comment, _ = block_to_entry('msgid "X"\nmsgstr "Y"')
        assert with_comment == without_comment

    def test_unexpected_line_is_reported_and_ignored(self):
        entry, diagnostics = block_to_entry(
            'msgid "X"\nmsgid_plural "Xs"\n"stray"\nmsgstr "Y"', first_line=7
        )
        assert entry == TranslationEntry("", "X", "Y")
        assert [(d.line, d.text) for d in diagnostics] == [
            (8, 'msgid_plural "Xs"'),
            (9, '"stray"'),
        ]
        assert diagnostics[0].message == "Unexpected input"

    def test_escapes_are_resolved(self):
        entry, _ = block_to_entry('msgid "Say \\"hi\\"\\n"\nmsgstr "Di \\"hola\\"\\n"')
        assert entry.msgid == 'Say "hi"\n'
        assert entry.msgstr == 'Di "hola"\n'


class TestHelpers:
    @pytest.mark.parametrize(
        "raw, expected",
        [('"abc"', "abc"), ('""', ""), ('"abc', "abc"), ("abc", "abc")],
    )
    def test_strip_quotes(self, raw, expected):
        assert strip_quotes(raw) == expected

    def test_unescape_keeps_unknown_escapes(self):
        assert unescape("a\\qb\\\\c") == "a\\qb\\c"


class TestMapTranslations:
    def test_lookup_keys_and_values(self):
        table = _table(PO_CONTENT)
        assert table["|Hello"] == "Hola"
        assert table["menu|File"] == "Archivo"
        assert table["|Hello, World!"] == "Hola, Mundo!"

    def test_one_entry_per_block(self):
        assert len(_table(PO_CONTENT)) == 4

    def test_missing_translation_falls_back_to_msgid(self):
        table, diagnostics = map_translations(parse_po(PO_CONTENT).entries)
        assert table["|Untranslated"] == "Untranslated"
        assert [d.text for d in diagnostics] == ["Untranslated"]

    def test_fallback_disabled_leaves_entry_out(self):
        table, diagnostics = map_translations(
            parse_po(PO_CONTENT).entries, fallback_to_msgid=False
        )
        assert "|Untranslated" not in table
        assert len(table) == 3
        assert diagnostics[0].message == "Missing translation"

    def test_fallback_example(self):
        assert _table('msgid "Hello"\nmsgstr ""') == {"|Hello": "Hello"}

    def test_header_never_in_table(self):
        table = _table(PO_CONTENT)
        assert "|" not in table
        assert all("Project-Id-Version" not in value for value in table.values())

    def test_parsing_is_idempotent(self):
        assert parse_po(PO_CONTENT) == parse_po(PO_CONTENT)
        assert _table(PO_CONTENT) == _table(PO_CONTENT)

    def test_fallback_diagnostic_points_at_block(self):
        _, diagnostics = map_translations(parse_po(PO_CONTENT).entries)
        assert diagnostics[0].line == PO_CONTENT.split("\n").index('msgid "Untranslated"') + 1


def test_read_translations(tmp_path):
    po_file = tmp_path / "es.po"
    po_file.write_text(PO_CONTENT + '\nmsgid "X"\nbogus\nmsgstr "Y"\n', encoding="utf-8")
    table, diagnostics = read_translations(po_file)
    assert table["|X"] == "Y"
    assert [d.message for d in diagnostics] == [
        "Unexpected input",
        "Missing translation, using the default locale's message",
    ]


def test_byte_order_mark_does_not_hide_header(tmp_path):
    content = (
        'msgid ""\nmsgstr ""\n"Project-Id-Version: demo\\n"\n"Language: es\\n"\n\n'
        'msgid "Hello"\nmsgstr "Hola"\n'
    )
    po_file = tmp_path / "es.po"
    po_file.write_bytes(b"\xef\xbb\xbf" + content.encode("utf-8"))
    table, diagnostics = read_translations(po_file)
    assert table == {"|Hello": "Hola"}
    assert diagnostics == []


def test_parse_po_skips_leading_byte_order_mark():
    assert parse_po("\ufeff" + PO_CONTENT) == parse_po(PO_CONTENT)
