import importlib
import logging
import pkgutil
import sys

from pocodegen.classes import TranslationTable

logger = logging.getLogger(__name__)


def translation_key(msgctxt: str, msgid: str) -> str:
    return f"{msgctxt}|{msgid}"


class TranslationRegistry:
    def __init__(self) -> None:
        self._tables: dict[str, TranslationTable] = {}

    def register(self, locale: str, table: TranslationTable) -> None:
        if locale in self._tables:
            logger.debug(f"Replacing translations for {locale}")
        self._tables[locale] = dict(table)

    def lookup(self, locale: str, key: str, default: str | None = None) -> str | None:
        table = self._tables.get(locale)
        if table is None:
            return default
        return table.get(key, default)

    def translate(self, locale: str, msgid: str, msgctxt: str = "") -> str:
        return self.lookup(locale, translation_key(msgctxt, msgid), msgid)

    def locales(self) -> list[str]:
        return sorted(self._tables)

    def __contains__(self, locale: object) -> bool:
        return locale in self._tables


def load_generated(registry: TranslationRegistry, package: str) -> list[str]:
    """Import every generated module in ``package`` and register it.

    Modules imported by an earlier call are reloaded so a redeploy in the same
    process is picked up. Modules without a ``register`` callable are skipped.
    """
    importlib.invalidate_caches()
    pkg = importlib.import_module(package)
    loaded = []
    for info in sorted(pkgutil.iter_modules(pkg.__path__), key=lambda i: i.name):
        name = f"{package}.{info.name}"
        if name in sys.modules:
            module = importlib.reload(sys.modules[name])
        else:
            module = importlib.import_module(name)
        register = getattr(module, "register", None)
        if not callable(register):
            logger.debug(f"{module.__name__} has no register function")
            continue
        register(registry)
        loaded.append(getattr(module, "LOCALE", info.name))
    logger.info(f"Loaded translations for {len(loaded)} locales from {package}")
    return loaded
