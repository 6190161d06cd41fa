from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator

from .command import Command, render
from .corpus import Corpus
from .errors import CorpusAllEmpty, InvalidArguments, InvalidStepCount
from .state import GenerationState
from . import categories
from .categories import Make, commandlist


class Category(IntEnum):
    NAVIGATION = 0
    FLAGS = 1
    DELETION = 2
    CLIPBOARD = 3
    EDITING = 4
    ATOMIC = 5
    TEXT = 6


# Each step draws r in [0, 100) and picks the first category whose bound exceeds it
BOUNDS: list[tuple[int, Category]] = [
    (10, Category.NAVIGATION),
    (20, Category.FLAGS),
    (30, Category.DELETION),
    (40, Category.CLIPBOARD),
    (50, Category.EDITING),
    (60, Category.ATOMIC),
    (100, Category.TEXT),
]

# steps in these categories count towards the undo/redo depth
MUTATING = (Category.DELETION, Category.TEXT)

SUFFIXES = ('.test', '.undone', '.redone')


@dataclass
class Options:
    binary: bool = False            # restrict to commands that are safe on non-text files
    turbo: int = 10000              # TURBO hint so the macro runs without redraws
    match_brackets: bool = True     # AUTOMATCHBRACKET 1 in text mode
    toggle_utf8: bool = True        # UTF8 0/1 (at random) in text mode
    replace_all: bool = True        # allow REPLACEALL, otherwise always REPLACEONCE
    undo_depth: int = 10000000      # "everything" for the final UNDO/REDO

    def __post_init__(self):
        if self.turbo <= 0:
            raise InvalidArguments(f"turbo must be positive, got {self.turbo}")
        if self.undo_depth <= 0:
            raise InvalidArguments(f"undo_depth must be positive, got {self.undo_depth}")


def category_for(r: int) -> Category:
    assert 0 <= r < 100, f"category draw {r} out of range"
    for bound, category in BOUNDS:
        if r < bound:
            return category
    raise AssertionError("unreachable")


def parse_step_count(value: int | str) -> int:
    """Accept a non-negative int, or a string spelling one"""
    if isinstance(value, bool):
        raise InvalidStepCount(value)
    if isinstance(value, str):
        s = value.strip()
        if not (s.isascii() and s.isdigit()):
            raise InvalidStepCount(value)
        return int(s)
    if not isinstance(value, int) or value < 0:
        raise InvalidStepCount(value)
    return value


class Synthesizer:
    """
    Generates a macro that opens target, makes random changes,
    and then saves, undoes everything, saves, redoes everything and saves
    so the three saved files can be compared.

    Pass a seed to get a reproducible macro.
    """
    def __init__(self, corpus: Corpus, target: str, options: Options | None = None, seed: int | None = None):
        self.corpus = corpus
        self.target = target
        self.options = options or Options()
        self.rng = random.Random(seed)
        self.state = GenerationState()
        self.counts: dict[Category, int] = {c: 0 for c in Category}

        text = not self.options.binary
        self.tables: dict[Category, list[Make]] = {
            Category.NAVIGATION: categories.NAVIGATION + (categories.NAVIGATION_TEXT if text else []),
            Category.FLAGS: categories.FLAGS + (categories.FLAGS_TEXT if text else []),
            Category.DELETION: categories.DELETION,
            Category.CLIPBOARD: [categories.clipboard],
            Category.EDITING: categories.EDITING,
            Category.ATOMIC: categories.ATOMIC,
            Category.TEXT: categories.TEXT,
        }

    def preamble(self) -> list[Command]:
        opts = self.options
        cmds: list[Command] = []
        if opts.binary:
            # before OPEN so the document is loaded in binary mode
            cmds.append(Command('BINARY'))
        cmds += [
            Command.string('OPEN', self.target),
            Command.number('TURBO', opts.turbo),
        ]
        if not opts.binary:
            if opts.match_brackets:
                cmds.append(Command.number('AUTOMATCHBRACKET', 1))
            if opts.toggle_utf8:
                cmds.append(Command.number('UTF8', self.rng.randrange(2)))
        return cmds

    def trailer(self) -> list[Command]:
        test, undone, redone = (self.target + suffix for suffix in SUFFIXES)
        depth = self.options.undo_depth
        return [
            Command.string('SAVEAS', test),
            Command.number('UNDO', depth),
            Command.string('SAVEAS', undone),
            Command.number('REDO', depth),
            Command.string('SAVEAS', redone),
            Command('EXIT'),
        ]

    def step(self) -> list[Command]:
        """Run one random step, returning zero or more commands"""
        category = category_for(self.rng.randrange(100))
        make = self.rng.choice(self.tables[category])
        cmds = commandlist(make(self))
        if category in MUTATING:
            self.state.mutated()
        self.counts[category] += 1
        return cmds

    def generate(self, step_count: int | str) -> Iterator[Command]:
        """
        Validate up front, so that any error is raised before
        the first command is produced, then return the command stream.
        """
        n = parse_step_count(step_count)
        if n and not self.corpus.has_content:
            raise CorpusAllEmpty()
        return self._generate(n)

    def _generate(self, n: int) -> Iterator[Command]:
        self.state = GenerationState()
        self.counts = {c: 0 for c in Category}

        yield from self.preamble()
        for _ in range(n):
            yield from self.step()
        yield from self.trailer()

        logging.info(
            f'generated {n} steps, {self.state.mutation_count} mutations: '
            + ', '.join(f'{c.name.lower()} {k}' for c, k in self.counts.items())
        )

    def script(self, step_count: int | str) -> list[str]:
        return render(self.generate(step_count))


def generate(step_count: int | str, target: str, options: Options | None = None, seed: int | None = None) -> list[str]:
    """Load target as the corpus and return the rendered macro lines"""
    n = parse_step_count(step_count)
    corpus = Corpus.load(target)
    return Synthesizer(corpus, target, options, seed).script(n)
