"""Owner resolution from GitHub-style ``CODEOWNERS`` files.

Each non-comment line is ``<pattern> <owner> [<owner> ...]``.  The last
matching rule wins, and a rule without owners leaves the path unowned.
Patterns follow gitignore conventions:

- a leading ``/`` or a ``/`` in the middle anchors the pattern at the root;
  otherwise it matches at any depth
- a trailing ``/`` only matches directory contents
- ``*`` and ``?`` never cross ``/``; ``**`` does
- a pattern naming a directory owns everything beneath it, except
  ``dir/*`` which only owns the direct children
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

CODEOWNERS_LOCATIONS = ("CODEOWNERS", ".github/CODEOWNERS", "docs/CODEOWNERS")
"""Locations checked, in order, inside each candidate directory."""

_GLOB_TOKEN_RE = re.compile(r"\*\*/|/\*\*$|\*\*|\*|\?|\\.|[^*?\\]+")


class OwnerResolver(Protocol):
    """Maps a repository-relative path to owner identifiers."""

    def resolve_owners(self, path: str) -> Sequence[str]: ...


class CodeOwnersError(ValueError):
    """Raised when a configured CODEOWNERS file cannot be read."""


def _translate(pattern: str) -> re.Pattern[str]:
    """Compile a CODEOWNERS pattern into a regex over relative paths."""
    dir_only = pattern.endswith("/")
    body = pattern.strip("/")
    anchored = pattern.startswith("/") or "/" in body
    direct_children = body.endswith("/*") and not body.endswith("/**/*")

    parts: list[str] = []
    for token in _GLOB_TOKEN_RE.findall(body):
        if token == "**/":
            parts.append("(?:.*/)?")
        elif token == "/**":
            parts.append("/.*")
        elif token == "**":
            parts.append(".*")
        elif token == "*":
            parts.append("[^/]*")
        elif token == "?":
            parts.append("[^/]")
        elif token.startswith("\\"):
            parts.append(re.escape(token[1:]))
        else:
            parts.append(re.escape(token))

    prefix = "" if anchored else "(?:.*/)?"
    if dir_only:
        suffix = "/.*"
    elif direct_children:
        suffix = ""
    else:
        suffix = "(?:/.*)?"
    return re.compile(prefix + "".join(parts) + suffix)


@dataclass(frozen=True)
class OwnerRule:
    """A single CODEOWNERS rule."""

    pattern: str
    owners: tuple[str, ...]
    regex: re.Pattern[str] = field(compare=False, repr=False)

    @classmethod
    def parse(cls, line: str) -> OwnerRule | None:
        """Parse one CODEOWNERS line; returns None for blanks and comments."""
        # an escaped "\#" starts a pattern, an unescaped "#" starts a comment
        content = re.split(r"(?<!\\)#", line, maxsplit=1)[0].strip()
        if not content:
            return None

        pattern, *owners = content.split()
        return cls(pattern=pattern, owners=tuple(owners), regex=_translate(pattern))

    def matches(self, path: str) -> bool:
        """Return True if this rule covers *path*."""
        return self.regex.fullmatch(path) is not None


class CodeOwners:
    """Resolves owners for repository-relative paths."""

    def __init__(self, rules: list[OwnerRule] | None = None, source: Path | None = None) -> None:
        """Initialize the resolver.

        Args:
            rules: Parsed rules in file order.
            source: The CODEOWNERS file the rules came from, if any.
        """
        self._rules = list(rules or [])
        self.source = source

    @property
    def rules(self) -> list[OwnerRule]:
        """Parsed rules in file order."""
        return list(self._rules)

    @classmethod
    def from_text(cls, text: str, source: Path | None = None) -> CodeOwners:
        """Build a resolver from CODEOWNERS file contents."""
        rules: list[OwnerRule] = []
        for number, line in enumerate(text.splitlines(), start=1):
            if line.lstrip().startswith("!"):
                logger.warning("Ignoring negated CODEOWNERS pattern on line %d: %s", number, line)
                continue
            rule = OwnerRule.parse(line)
            if rule is not None:
                rules.append(rule)
        return cls(rules, source=source)

    @classmethod
    def from_file(cls, path: str | Path) -> CodeOwners:
        """Load a resolver from an explicit CODEOWNERS path.

        Raises:
            CodeOwnersError: If the file cannot be read.
        """
        owners_file = Path(path)
        try:
            text = owners_file.read_text(encoding="utf-8")
        except OSError as exc:
            raise CodeOwnersError(f"Cannot read CODEOWNERS file {owners_file}: {exc}") from exc
        return cls.from_text(text, source=owners_file)

    @classmethod
    def from_directory(cls, base_dir: str | Path | None = None) -> CodeOwners:
        """Find the nearest CODEOWNERS file at or above *base_dir*.

        Falls back to a resolver without rules when none is found.
        """
        start = Path(base_dir or Path.cwd()).resolve()
        for directory in (start, *start.parents):
            for location in CODEOWNERS_LOCATIONS:
                candidate = directory / location
                if candidate.is_file():
                    logger.debug("Using CODEOWNERS file %s", candidate)
                    return cls.from_file(candidate)

        logger.debug("No CODEOWNERS file found at or above %s", start)
        return cls()

    def resolve_owners(self, path: str) -> list[str]:
        """Return the owners of *path* according to the last matching rule."""
        normalized = path.replace("\\", "/").removeprefix("./").lstrip("/")
        for rule in reversed(self._rules):
            if rule.matches(normalized):
                return list(rule.owners)
        return []
