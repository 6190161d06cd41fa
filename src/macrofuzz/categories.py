from __future__ import annotations
import re
from os import path
from typing import TYPE_CHECKING, Callable, cast

from .command import Command
from .corpus import sample_substring
from .state import ClipMode

if TYPE_CHECKING:
    from .synthesizer import Synthesizer


Emitted = None | Command | list[Command]
Make = Callable[['Synthesizer'], Emitted]


def commandlist(emitted: Emitted) -> list[Command]:
    if isinstance(emitted, list):
        return cast(list[Command], emitted)
    elif emitted is not None:
        return [emitted]
    else:
        return []


def cmd(name: str) -> Make:
    return lambda gen: Command(name)


def num(name: str, n: int, lo: int = 0) -> Make:
    """Command with a uniform numeric argument in [lo, lo+n)"""
    return lambda gen: Command.number(name, lo + gen.rng.randrange(n))


# Intended to start a bracket matching search
BRACKETS_REGEXP = r'\(|\)|\[|\]|{|}|<|>'

# Canned patterns for regexp find/replace: capitalized word, word, digits
REPLACE_REGEXPS = ['[A-Z][a-z]+', '[a-z]+', '[0-9]+']

EXTENSION = re.compile(r'\.([a-z0-9]+)$')


### Navigation, never changes the document

def _goto_line(gen: Synthesizer) -> Command:
    return Command.number('GOTOLINE', gen.rng.randrange(max(1, len(gen.corpus))) + 1)


def _adjust_view(gen: Synthesizer) -> Command:
    return Command.token('ADJUSTVIEW', gen.rng.choice('TMB') + gen.rng.choice('LCR'))


NAVIGATION: list[Make] = [
    num('GOTOCOLUMN', 80, 1),
    _goto_line,
    num('LINEUP', 100, 1),
    num('LINEDOWN', 100, 1),
    cmd('MOVEBOS'),
    cmd('MOVEEOF'),
    cmd('MOVEEOL'),
    cmd('MOVEINCDOWN'),
    cmd('MOVEINCUP'),
    num('MOVELEFT', 80),
    num('MOVERIGHT', 80),
    cmd('MOVESOF'),
    cmd('MOVESOL'),
    cmd('MOVETOS'),
    cmd('NEXTPAGE'),
    cmd('PAGEDOWN'),
    cmd('PAGEUP'),
    cmd('PREVPAGE'),
    cmd('SETBOOKMARK'),
    cmd('GOTOBOOKMARK'),
    lambda gen: Command.token('GOTOBOOKMARK', '-'),
    cmd('UNSETBOOKMARK'),
    _adjust_view,
    cmd('TOGGLESEOL'),
    cmd('TOGGLESEOF'),
]

# word motions and bracket matching only make sense for text
NAVIGATION_TEXT: list[Make] = [
    cmd('MOVEEOW'),
    lambda gen: Command.token('NEXTWORD', str(gen.rng.randrange(20))),
    lambda gen: Command.token('PREVWORD', str(gen.rng.randrange(20))),
    lambda gen: Command.token('FINDREGEXP', BRACKETS_REGEXP),
]


### Flags, never changes the document

FLAGS: list[Make] = [
    cmd('FREEFORM'),
    cmd('INSERT'),
    cmd('TABS'),
    cmd('SHIFTTABS'),
    num('TABSIZE', 20, 1),
    cmd('DELTABS'),
]

FLAGS_TEXT: list[Make] = [
    cmd('AUTOINDENT'),
    num('RIGHTMARGIN', 80, 1),
    cmd('WORDWRAP'),
]


### Deletion

DELETION: list[Make] = [
    num('BACKSPACE', 20),
    num('DELETECHAR', 20),
    cmd('DELETEEOL'),
    num('DELETELINE', 10),
    num('DELETENEXTWORD', 3),
    num('DELETEPREVWORD', 3),
]


### Clipboard and selection

def clipboard(gen: Synthesizer) -> Emitted:
    """
    Open a selection, then close it by copy/cut/erase/filter;
    a filled clipboard gets pasted before the next selection opens.
    Half the draws while idle do nothing at all.
    """
    state, rng = gen.state, gen.rng
    if state.mode == ClipMode.SELECTING:
        match rng.randrange(4):
            case 0:
                state.end_block(clip=True)
                return Command('COPY')
            case 1:
                state.end_block(clip=True)
                return Command('CUT')
            case 2:
                state.end_block(clip=False)
                return Command('ERASE')
            case _:
                state.end_block(clip=False)
                return Command.token('THROUGH', 'sort')

    choice = rng.randrange(4)
    if choice > 1:
        return None
    vert = 'VERT' if choice else ''
    if state.clipboard_full:
        state.paste()
        return Command('PASTE' + vert)
    state.start_block()
    return Command('MARK' + vert)


### Editing

def _fragment(gen: Synthesizer) -> str:
    return sample_substring(gen.corpus.sample_nonempty_line(gen.rng), gen.rng)


def _replace(gen: Synthesizer) -> Command:
    once = not gen.options.replace_all or gen.rng.randrange(2) == 1
    return Command.string('REPLACEONCE' if once else 'REPLACEALL', _fragment(gen))


def find_replace(gen: Synthesizer) -> list[Command]:
    find = Command.string('FIND', _fragment(gen))
    return [find, _replace(gen)]


def regexp_replace(gen: Synthesizer) -> list[Command]:
    find = Command.token('FINDREGEXP', gen.rng.choice(REPLACE_REGEXPS))
    return [find, _replace(gen)]


def undo_redo(gen: Synthesizer) -> list[Command]:
    t = gen.rng.randrange(gen.state.undo_limit())
    return [Command.number('UNDO', t), Command.number('REDO', t)]


def shift(gen: Synthesizer) -> Command:
    rng = gen.rng
    direction = rng.choice('<>')
    n = rng.randrange(20)
    unit = rng.choice('ts')
    return Command.token('SHIFT', f'{direction}{n}{unit}')


def syntax(gen: Synthesizer) -> Command:
    wildcard = gen.rng.randrange(2) == 0
    m = EXTENSION.search(path.basename(gen.target))
    return Command.token('SYNTAX', '*' if wildcard or m is None else m.group(1))


EDITING: list[Make] = [
    num('CAPITALIZE', 10),
    num('CENTER', 10),
    find_replace,
    regexp_replace,
    num('PARAGRAPH', 20),
    undo_redo,
    num('TOLOWER', 10),
    num('TOUPPER', 10),
    num('UNDELLINE', 10),
    cmd('AUTOCOMPLETE'),
    shift,
    cmd('REPEATLAST'),
    syntax,
    cmd('NAMECONVERT'),
]


### Atomicity

ATOMIC: list[Make] = [cmd('ATOMICUNDO')]


### Text generation

TEXT: list[Make] = [
    num('INSERTCHAR', 126, 1),
    cmd('INSERTLINE'),
    lambda gen: Command.string('INSERTSTRING', gen.corpus.sample_nonempty_line(gen.rng)),
    cmd('INSERTTAB'),
]
