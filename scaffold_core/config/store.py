"""scaffold_core.config.store

The persisted project config store.

Lookup precedence for :meth:`ConfigStore.get`:

1. the per-invocation answers override (when the key maps to an answer name
   that is present and non-empty)
2. the persisted INI store (``[section]`` / ``key=value``)
3. the caller's default

Looking up an undeclared key never raises. Reads are pure; the file on disk
only changes on :meth:`ConfigStore.save` (and therefore on
:meth:`ConfigStore.update_from_answers`).
"""

from __future__ import annotations

import configparser
import io
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from scaffold_core.config.answers import AnswersOverride, env_name_for, key_for_env
from scaffold_core.io.fs import write_text_atomic

logger = logging.getLogger(__name__)

TRUE_VALUES = {"true", "yes", "1", "on"}
FALSE_VALUES = {"false", "no", "0", "off"}


def split_key(key: str) -> Optional[Tuple[str, str]]:
    section, sep, option = str(key).partition(".")
    if not sep or not section or not option:
        return None
    return section.strip(), option.strip()


def answer_names_for(key: str) -> List[str]:
    """Answer names that may override *key*, alias first."""

    names = [env_name_for(key)]
    derived = str(key).replace(".", "_").upper()
    if derived not in names:
        names.append(derived)
    return names


def _new_parser() -> configparser.ConfigParser:
    # No interpolation: values such as "%s" or "$HOME" are stored verbatim.
    return configparser.ConfigParser(interpolation=None)


class ConfigStore:
    """INI-backed key/value store addressed as ``section.key``."""

    def __init__(
        self,
        path: Optional[Path] = None,
        *,
        answers: Optional[AnswersOverride] = None,
    ) -> None:
        self.path = Path(path) if path else None
        self.answers = answers or AnswersOverride()
        self.warnings: List[str] = []
        self._parser = _new_parser()
        if self.path and self.path.is_file():
            self._parser.read(self.path, encoding="utf-8")

    @classmethod
    def from_text(cls, text: str, *, answers: Optional[AnswersOverride] = None) -> "ConfigStore":
        store = cls(None, answers=answers)
        store._parser.read_string(text)
        return store

    @property
    def exists(self) -> bool:
        return bool(self.path and self.path.is_file())

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def persisted(self, key: str) -> Optional[str]:
        """Value from the INI store only (ignores answers)."""

        parts = split_key(key)
        if parts is None:
            return None
        section, option = parts
        if not self._parser.has_option(section, option):
            return None
        value = self._parser.get(section, option)
        return value if value != "" else None

    def get(self, key: str, default: Any = None) -> Any:
        for name in answer_names_for(key):
            answer = self.answers.get(name)
            if answer is not None:
                return answer
        value = self.persisted(key)
        if value is not None:
            return value
        return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        raw = self.get(key)
        if raw is None:
            return default
        s = str(raw).strip().lower()
        if s in TRUE_VALUES:
            return True
        if s in FALSE_VALUES:
            return False
        self._warn(f"{key}: expected true/false, got {raw!r}; using {default}")
        return default

    def get_int(self, key: str, default: int = 0) -> int:
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return int(str(raw).strip())
        except ValueError:
            self._warn(f"{key}: expected an integer, got {raw!r}; using {default}")
            return default

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def sections(self) -> List[str]:
        return list(self._parser.sections())

    def items(self, section: str) -> Dict[str, str]:
        if not self._parser.has_section(section):
            return {}
        return {k: v for k, v in self._parser.items(section)}

    def as_dict(self) -> Dict[str, Dict[str, str]]:
        return {s: self.items(s) for s in self.sections()}

    def section_view(self, section: str) -> Dict[str, str]:
        """Effective values of one section, answers applied."""

        out = self.items(section)
        for name, _ in self.answers:
            key = key_for_env(name, self.sections())
            value = self.answers.get(name)
            if key and value is not None and key.startswith(section + "."):
                out[key.split(".", 1)[1]] = value
        return out

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        parts = split_key(key)
        if parts is None:
            raise ValueError(f"Config keys must look like 'section.key', got {key!r}")
        section, option = parts
        if not self._parser.has_section(section):
            self._parser.add_section(section)
        self._parser.set(section, option, _to_ini(value))

    def set_default(self, key: str, value: Any) -> bool:
        """Set *key* only if it has no persisted value. Returns True if set."""

        if self.persisted(key) is not None:
            return False
        self.set(key, value)
        return True

    def to_text(self) -> str:
        buf = io.StringIO()
        self._parser.write(buf)
        return buf.getvalue()

    def save(self, path: Optional[Path] = None) -> Path:
        target = Path(path) if path else self.path
        if target is None:
            raise ValueError("ConfigStore has no path to save to")
        write_text_atomic(target, self.to_text())
        self.path = target
        logger.debug("Saved config store to %s", target)
        return target

    def update_from_answers(self, answers: Optional[AnswersOverride] = None, *, save: bool = True) -> List[str]:
        """Merge every answer into the persisted store.

        Keys not mentioned by the answers keep their current value. Answers
        whose name maps to no ``section.key`` are skipped with a warning.
        Returns the dotted keys that were written.
        """

        src = answers if answers is not None else self.answers
        updated: List[str] = []
        for name, value in src:
            if value == "":
                continue
            key = key_for_env(name, self.sections())
            if key is None:
                self._warn(f"answer {name!r} does not map to a config key; ignored")
                continue
            self.set(key, value)
            updated.append(key)

        if updated and save and self.path is not None:
            self.save()
        return updated

    def _warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)
        logger.warning(message)


def _to_ini(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)
