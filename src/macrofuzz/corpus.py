from __future__ import annotations
import logging
import random
from typing import Self

from .errors import CorpusUnavailable, CorpusAllEmpty


# Undecodable bytes (e.g. when fuzzing with a binary file) are carried as
# lone surrogates so that writing them back with the same error handler
# reproduces the original bytes exactly.
ENCODING = 'utf-8'
ERRORS = 'surrogateescape'


def chomp(s: str) -> str:
    """Strip a single trailing line terminator (\\n, \\r\\n or \\r)"""
    if s.endswith('\r\n'):
        return s[:-2]
    if s.endswith('\n') or s.endswith('\r'):
        return s[:-1]
    return s


def split_lines(text: str) -> list[str]:
    """
    Split text into lines keeping their terminators.
    Only newline separates lines, unlike str.splitlines() which also breaks
    on form feeds, \\x1c-\\x1e and friends that routinely occur in binary data.
    """
    parts = text.split('\n')
    lines = [p + '\n' for p in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


class Corpus:
    """
    The lines of the target document, used only as a source of
    realistic content for generated commands.  Immutable once loaded.
    """
    def __init__(self, lines: list[str]):
        self._lines = tuple(lines)
        self._nonempty = tuple(s for s in map(chomp, self._lines) if s)

    @classmethod
    def from_text(cls, text: str) -> Self:
        return cls(split_lines(text))

    @classmethod
    def load(cls, path: str) -> Self:
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise CorpusUnavailable(path, e.strerror or str(e)) from e

        corpus = cls.from_text(data.decode(ENCODING, ERRORS))
        logging.info(f'loaded corpus {path}: {len(data)} bytes, {len(corpus)} lines')
        return corpus

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def has_content(self) -> bool:
        """True if at least one line is non-empty after chomping"""
        return bool(self._nonempty)

    def line(self, i: int, strip: bool = True) -> str:
        return chomp(self._lines[i]) if strip else self._lines[i]

    def contains(self, fragment: str) -> bool:
        """Is fragment a contiguous piece of some (chomped) line?"""
        return any(fragment in chomp(s) for s in self._lines)

    def sample_line(self, rng: random.Random) -> str:
        """A uniformly random line without its terminator, possibly empty"""
        return self.line(rng.randrange(len(self._lines)))

    def sample_nonempty_line(self, rng: random.Random) -> str:
        """
        A uniformly random non-empty line, the same as drawing
        lines until one isn't empty but without the retries.
        """
        if not self._nonempty:
            raise CorpusAllEmpty()
        return rng.choice(self._nonempty)


def sample_substring(line: str, rng: random.Random) -> str:
    """
    Pick a start in the first half of line and a length of up to
    half the line, returning the (non-empty) slice clipped at the end.
    """
    assert line, "sample_substring: expected non-empty line"
    half = max(1, len(line) // 2)
    start = rng.randrange(half)
    length = 1 + rng.randrange(half)
    return line[start:start+length]
