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
"""Property store adapters: in-memory and ``.properties`` file backed."""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path

import structlog

from httpcall.kernel.exceptions import PersistenceException

logger = structlog.get_logger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_SPECIAL = re.compile(r"[\\\n\r\t\f=:#!]")
_ESCAPE_SEQUENCE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", "\f": "\\f"}
_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t", "f": "\f"}
_BLANK = " \t\f"


def escape(text: str, *, key: bool = False) -> str:
    """Escape ``text`` for a ``.properties`` file.

    Keys escape every space; values only a leading one.
    """
    escaped = _SPECIAL.sub(lambda m: _ESCAPES.get(m.group(0), "\\" + m.group(0)), text)
    if key:
        return escaped.replace(" ", "\\ ")
    return "\\" + escaped if escaped.startswith(" ") else escaped


def unescape(text: str) -> str:
    """Resolve backslash escapes, including ``\\uXXXX``."""

    def replace(match: re.Match[str]) -> str:
        sequence = match.group(1)
        if len(sequence) == 5:
            return chr(int(sequence[1:], 16))
        return _UNESCAPES.get(sequence, sequence)

    return _ESCAPE_SEQUENCE.sub(replace, text)


def _logical_lines(content: str) -> Iterator[str]:
    """Yield entries, joining lines that end with an odd number of backslashes."""
    pending = ""
    for raw_line in _LINE_BREAK.split(content):
        line = raw_line.lstrip(_BLANK)
        if not pending and (not line or line[0] in "#!"):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2:
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def _split_entry(line: str) -> tuple[str, str]:
    end = 0
    while end < len(line) and line[end] not in "=:" + _BLANK:
        end += 2 if line[end] == "\\" else 1
    key = line[: min(end, len(line))]

    start = end
    while start < len(line) and line[start] in _BLANK:
        start += 1
    if start < len(line) and line[start] in "=:":
        start += 1
        while start < len(line) and line[start] in _BLANK:
            start += 1
    return unescape(key), unescape(line[start:])


class InMemoryPropertyStore:
    """Dict-backed property store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def has(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def as_dict(self) -> dict[str, str]:
        """Return a copy of all stored properties."""
        return dict(self._data)

    def __len__(self) -> int:
        return len(self._data)


class PropertiesFileStore(InMemoryPropertyStore):
    """Property store persisted in Java ``.properties`` format.

    The file is read when the store is created (if it exists) and written
    back by :meth:`save`. Comments (``#``, ``!``), blank lines, ``=``/``:``/
    whitespace separators, line continuations and backslash escapes are
    understood on load; keys and values are escaped on save so that any
    string survives a save and reload unchanged.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        super().__init__(self._load(self._path))

    @property
    def path(self) -> Path:
        return self._path

    @staticmethod
    def _load(path: Path) -> dict[str, str]:
        if not path.is_file():
            return {}
        data: dict[str, str] = {}
        for line in _logical_lines(path.read_text(encoding="utf-8")):
            key, value = _split_entry(line)
            data[key] = value
        return data

    def save(self) -> Path:
        """Write all properties to the backing file, sorted by key."""
        lines = [f"{escape(key, key=True)}={escape(self._data[key])}" for key in sorted(self._data)]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
        except OSError as exc:
            raise PersistenceException(
                f"Failed to write properties file: {exc}", context={"path": str(self._path)}
            ) from exc
        logger.debug("properties_saved", path=str(self._path), count=len(lines))
        return self._path
