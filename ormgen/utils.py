# File: ormgen/utils.py
"""
ormgen - Naming Engine & Helpers
=================================
Deterministic string transformations (case conversion, pluralisation),
file I/O and code-formatting utilities used by every generator.

- All naming functions are pure and decorated with
  ``@lru_cache(maxsize=None)``; generators call them repeatedly with the
  same handful of entity names.
- ``to_snake_case`` and ``to_pascal_case`` share one word splitter, so
  ``to_snake_case(to_pascal_case(s)) == to_snake_case(s)`` for
  identifier-safe input.
- Pluralisation is table-driven for irregular nouns, layered over the
  usual English suffix rules.  No locale is consulted.
- File writes are atomic (temp file + rename).
"""

from __future__ import annotations

import functools
import hashlib
import keyword
import logging
import os
import re
import tempfile
import time
from pathlib import Path, PurePath
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple, Union

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_ACRONYM_BOUNDARY_RE: re.Pattern[str] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY_RE: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]+")
_TRAILING_WORD_RE: re.Pattern[str] = re.compile(r"([A-Z]?[a-z]+|[A-Z]+)$")

# Builtins that make poor attribute / parameter names in generated code
_PYTHON_BUILTINS: FrozenSet[str] = frozenset({
    "id", "type", "list", "dict", "set", "str", "int", "float",
    "bool", "bytes", "object", "hash", "input", "print", "range",
    "len", "map", "filter", "format", "iter", "next", "open",
})


# ---------------------------------------------------------------------------
# Word splitting & case conversion
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def _extract_words(name: str) -> Tuple[str, ...]:
    """
    Split any casing style into lowercase words.

    Boundaries: non-alphanumeric runs, lower/digit → Upper
    (``userName``), and the end of an acronym (``HTTPResponse``).
    Digits stay attached to the word before them (``item2``).
    """
    s: str = _ACRONYM_BOUNDARY_RE.sub(r"\1 \2", name)
    s = _CAMEL_BOUNDARY_RE.sub(r"\1 \2", s)
    s = _NON_ALPHANUM_RE.sub(" ", s)
    return tuple(w.lower() for w in s.split() if w)


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Convert any string to snake_case.

    Examples:
        >>> to_snake_case("UserProfile")
        'user_profile'
        >>> to_snake_case("getHTTPResponse")
        'get_http_response'
        >>> to_snake_case("already_snake")
        'already_snake'
    """
    return "_".join(_extract_words(name))


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """
    Convert any string to PascalCase.

    Examples:
        >>> to_pascal_case("user_profile")
        'UserProfile'
        >>> to_pascal_case("HTTPResponse")
        'HttpResponse'
    """
    return "".join(w.capitalize() for w in _extract_words(name))


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """Convert any string to camelCase."""
    words: Tuple[str, ...] = _extract_words(name)
    if not words:
        return ""
    return words[0] + "".join(w.capitalize() for w in words[1:])


# ---------------------------------------------------------------------------
# Pluralisation
# ---------------------------------------------------------------------------

# singular → plural; applied to the last word of a compound name
_IRREGULAR_PLURALS: Dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
    "ox": "oxen",
    "leaf": "leaves",
    "loaf": "loaves",
    "thief": "thieves",
    "wolf": "wolves",
    "half": "halves",
    "calf": "calves",
    "shelf": "shelves",
    "elf": "elves",
    "knife": "knives",
    "wife": "wives",
    "life": "lives",
    "hero": "heroes",
    "potato": "potatoes",
    "tomato": "tomatoes",
    "echo": "echoes",
    "movie": "movies",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "axis": "axes",
    "crisis": "crises",
    "analysis": "analyses",
    "criterion": "criteria",
    "datum": "data",
    "medium": "media",
    "quiz": "quizzes",
    "bus": "buses",
    "status": "statuses",
}

_IRREGULAR_SINGULARS: Dict[str, str] = {v: k for k, v in _IRREGULAR_PLURALS.items()}

# Words whose plural is the same as the singular
_UNCOUNTABLE: FrozenSet[str] = frozenset({
    "equipment", "information", "rice", "money", "species", "series",
    "fish", "sheep", "deer", "news", "metadata", "feedback", "software",
})

_VOWELS: str = "aeiou"


def _match_case(template: str, word: str) -> str:
    """Carry the capitalisation of *template*'s first letter over to *word*."""
    if template[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


def _split_trailing_word(name: str) -> Tuple[str, str]:
    """Split ``BlogPerson`` / ``blog_person`` into (head, trailing word)."""
    match = _TRAILING_WORD_RE.search(name)
    if match is None:
        return name, ""
    return name[: match.start()], match.group(1)


@functools.lru_cache(maxsize=None)
def to_plural(name: str) -> str:
    """
    English pluralisation sufficient for table and variable names.

    Examples:
        >>> to_plural("user")
        'users'
        >>> to_plural("company")
        'companies'
        >>> to_plural("blog_person")
        'blog_people'
    """
    if not name:
        return ""

    head, word = _split_trailing_word(name)
    if not word:
        return name + "s"
    lower: str = word.lower()

    if lower in _UNCOUNTABLE or lower in _IRREGULAR_SINGULARS:
        return name
    if lower in _IRREGULAR_PLURALS:
        return head + _match_case(word, _IRREGULAR_PLURALS[lower])

    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return name + "es"
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in _VOWELS:
        return name[:-1] + "ies"
    return name + "s"


@functools.lru_cache(maxsize=None)
def to_singular(name: str) -> str:
    """
    Reverse of :func:`to_plural`.  Singular input is returned unchanged.

    Examples:
        >>> to_singular("people")
        'person'
        >>> to_singular("boxes")
        'box'
    """
    if not name:
        return ""

    head, word = _split_trailing_word(name)
    if not word:
        return name
    lower: str = word.lower()

    if lower in _UNCOUNTABLE or lower in _IRREGULAR_PLURALS:
        return name
    if lower in _IRREGULAR_SINGULARS:
        return head + _match_case(word, _IRREGULAR_SINGULARS[lower])

    if lower.endswith("ies") and len(lower) > 3:
        return name[:-3] + "y"
    if lower.endswith(("sses", "xes", "zes", "ches", "shes")):
        return name[:-2]
    if lower.endswith("s") and not lower.endswith(("ss", "us", "is")):
        return name[:-1]
    return name


pluralize = to_plural
singularize = to_singular


# ---------------------------------------------------------------------------
# Identifier helpers
# ---------------------------------------------------------------------------


def is_valid_identifier(name: str) -> bool:
    """True when *name* can be used as a Python attribute name."""
    return name.isidentifier() and not keyword.iskeyword(name)


@functools.lru_cache(maxsize=None)
def safe_identifier(name: str) -> str:
    """
    Make a snake_case string that is safe as a Python local variable.

    Prefixes a leading digit with ``_`` and suffixes keywords and common
    builtins with ``_``.
    """
    result: str = to_snake_case(name)
    if not result:
        return "_unnamed"
    if result[0].isdigit():
        result = f"_{result}"
    if keyword.iskeyword(result) or result in _PYTHON_BUILTINS:
        result = f"{result}_"
    return result


def path_to_module(path: Union[str, PurePath]) -> str:
    """
    Turn a package directory into a dotted import path.

    A leading ``src`` segment is dropped (src layout).

    Examples:
        >>> path_to_module("app/models")
        'app.models'
        >>> path_to_module("src/shop/models")
        'shop.models'
    """
    parts: List[str] = [
        p for p in PurePath(path).parts if p not in ("", ".", "/")
    ]
    if len(parts) > 1 and parts[0] == "src":
        parts = parts[1:]
    return ".".join(parts)


# ---------------------------------------------------------------------------
# Code formatting helpers
# ---------------------------------------------------------------------------


def indent_lines(lines: Sequence[str], level: int = 1, size: int = 4) -> List[str]:
    """Indent a list of lines, leaving blank lines blank."""
    prefix: str = " " * (level * size)
    return [prefix + line if line.strip() else line for line in lines]


def python_string_literal(value: str) -> str:
    """
    Render *value* as a Python string literal.

    Multi-line text uses a triple-quoted literal when that can be done
    verbatim; everything else falls back to ``repr``.
    """
    if "\n" in value and '"""' not in value and "\\" not in value and not value.endswith('"'):
        return f'"""{value}"""'
    return repr(value)


def build_import_block(imports: Dict[str, Set[str]]) -> str:
    """
    Build a sorted, de-duplicated import block from a mapping of
    module → set of names.  An empty set renders ``import module``.

    Example:
        >>> build_import_block({"typing": {"List", "Optional"}, "datetime": {"datetime"}})
        'from datetime import datetime\\nfrom typing import List, Optional'
    """
    lines: List[str] = []
    for module in sorted(imports.keys()):
        names: List[str] = sorted(imports[module], key=lambda n: (n.lower(), n))
        if names:
            lines.append(f"from {module} import {', '.join(names)}")
        else:
            lines.append(f"import {module}")
    return "\n".join(lines)


def merge_import_dicts(*dicts: Dict[str, Set[str]]) -> Dict[str, Set[str]]:
    """Merge import dictionaries, unifying the name sets."""
    result: Dict[str, Set[str]] = {}
    for d in dicts:
        for module, names in d.items():
            result.setdefault(module, set()).update(names)
    return result


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create *path* (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def read_text_or_empty(path: Path) -> str:
    """Read *path*, returning ``""`` when the file does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path*, creating parent directories.

    When *atomic* is True the text goes to a temporary file in the same
    directory first and is renamed over the target, so a crash never leaves
    a half-written file.

    Returns the number of bytes written.  ``OSError`` propagates.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")

    if atomic:
        fd, tmp_name = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(encoded)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    else:
        path.write_bytes(encoded)

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


def sha256_hex(content: str) -> str:
    """Return the SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling generation steps.

    Usage:
        with Timer("render model") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "to_snake_case",
    "to_pascal_case",
    "to_camel_case",
    "to_plural",
    "to_singular",
    "pluralize",
    "singularize",
    "is_valid_identifier",
    "safe_identifier",
    "path_to_module",
    "indent_lines",
    "python_string_literal",
    "build_import_block",
    "merge_import_dicts",
    "ensure_directory",
    "read_text_or_empty",
    "write_file",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("ormgen.utils loaded - %d public symbols.", len(__all__))
