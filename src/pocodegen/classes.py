from dataclasses import dataclass, field
from pathlib import Path

TranslationTable = dict[str, str]


@dataclass
class TranslationEntry:
    msgctxt: str = ""
    msgid: str = ""
    msgstr: str = ""
    line: int = field(default=0, compare=False)

    @property
    def key(self) -> str:
        return f"{self.msgctxt}|{self.msgid}"


@dataclass
class Diagnostic:
    line: int
    text: str
    message: str

    def __str__(self) -> str:
        if self.line:
            return f"line {self.line}: {self.message} -->{self.text}<--"
        return f"{self.message} -->{self.text}<--"


@dataclass
class ParseResult:
    entries: list[TranslationEntry] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class Settings:
    src: str = "src"
    ns: str = "translations"
    po: str = "i18n"
    js_path: str | None = None
    output_format: str = "python"
    fallback_to_msgid: bool = True
    timeout: float | None = None
    # Filled in by deploy.expand_settings
    srcdir: Path | None = None
    podir: Path | None = None
    output_path: Path | None = None
    outdir: Path | None = None
    messages_pot: Path | None = None
    existing_po_files: list[str] = field(default_factory=list)


@dataclass
class CommandResult:
    args: list[str]
    returncode: int | None
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class LocaleReport:
    locale: str
    po_file: Path
    output_file: Path
    entries: int
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class DeployReport:
    po_dir: Path
    output_path: Path
    locales: list[LocaleReport] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [d for report in self.locales for d in report.diagnostics]
