"""
Check a generated macro without running the editor.

We parse the script back into commands and replay the bookkeeping
the generator does: the selection/clipboard sequence must be sane,
every searched, replacing or inserted string must come from the corpus,
and the script must end by saving, undoing, saving, redoing and saving.

    python -m macrofuzz.replay macro.txt document.txt
"""
from __future__ import annotations
import argparse
import logging
import sys

from .command import Command, parse_script
from .corpus import Corpus, ENCODING, ERRORS
from .errors import MacroError, ScriptError
from .state import ClipMode


PREAMBLE = ('BINARY', 'OPEN', 'TURBO', 'AUTOMATCHBRACKET', 'UTF8')
SAMPLED = ('FIND', 'REPLACEALL', 'REPLACEONCE', 'INSERTSTRING')
TRAILER_SHAPE = ('SAVEAS', 'UNDO', 'SAVEAS', 'REDO', 'SAVEAS', 'EXIT')


def split_script(cmds: list[Command]) -> tuple[list[Command], list[Command], list[Command]]:
    """Split into preamble, steps and trailer"""
    i = 0
    while i < len(cmds) and cmds[i].name in PREAMBLE:
        i += 1
    j = max(i, len(cmds) - len(TRAILER_SHAPE))
    return cmds[:i], cmds[i:j], cmds[j:]


def check_preamble(preamble: list[Command], target: str | None = None) -> list[str]:
    names = [c.name for c in preamble]
    if names[:1] == ['BINARY']:
        names = names[1:]
        if 'AUTOMATCHBRACKET' in names or 'UTF8' in names:
            return ['binary preamble should not toggle bracket matching or UTF-8']
    if names[:2] != ['OPEN', 'TURBO']:
        return [f'preamble should start with OPEN, TURBO, got {names}']
    opened = next(c for c in preamble if c.name == 'OPEN')
    if target is not None and opened.arg != target:
        return [f'OPEN {opened.arg!r} is not the target {target!r}']
    return []


def check_trailer(trailer: list[Command], target: str | None = None) -> list[str]:
    names = tuple(c.name for c in trailer)
    if names != TRAILER_SHAPE:
        return [f'trailer should be {" ".join(TRAILER_SHAPE)}, got {" ".join(names)}']

    problems: list[str] = []
    test, undo, undone, redo, redone, _ = trailer
    if undo.arg is None or undo.arg != redo.arg:
        problems.append(f'UNDO {undo.arg} and REDO {redo.arg} should match')
    base = target if target is not None else str(test.arg).removesuffix('.test')
    for saved, suffix in zip((test, undone, redone), ('.test', '.undone', '.redone')):
        if saved.arg != base + suffix:
            problems.append(f'SAVEAS {saved.arg!r} should save {base}{suffix}')
    return problems


def check_clipboard(steps: list[Command]) -> list[str]:
    """Replay selection and clipboard commands"""
    problems: list[str] = []
    mode = ClipMode.IDLE
    clip = False
    for c in steps:
        match c.name:
            case 'MARK' | 'MARKVERT':
                if mode == ClipMode.SELECTING:
                    problems.append(f'{c}: selection already open')
                if clip:
                    problems.append(f'{c}: clipboard was never pasted')
                mode = ClipMode.SELECTING
            case 'COPY' | 'CUT' | 'ERASE' | 'THROUGH':
                if mode != ClipMode.SELECTING:
                    problems.append(f'{c}: no selection')
                mode = ClipMode.IDLE
                clip = clip or c.name in ('COPY', 'CUT')
            case 'PASTE' | 'PASTEVERT':
                if not clip:
                    problems.append(f'{c}: nothing copied')
                if mode == ClipMode.SELECTING:
                    problems.append(f'{c}: selection still open')
                clip = False
    return problems


def check_sampled(steps: list[Command], corpus: Corpus) -> list[str]:
    problems: list[str] = []
    for c in steps:
        if c.name not in SAMPLED:
            continue
        if not c.quoted or not c.arg:
            problems.append(f'{c}: expected a non-empty quoted string')
        elif not corpus.contains(str(c.arg)):
            problems.append(f'{c}: not found in corpus')
    return problems


def check(script: str, corpus: Corpus, target: str | None = None) -> list[str]:
    """Return a list of problems with script, empty if it looks right"""
    try:
        cmds = parse_script(script)
    except ScriptError as e:
        return [str(e)]

    preamble, steps, trailer = split_script(cmds)
    problems = check_preamble(preamble, target)
    problems += check_clipboard(steps)
    problems += check_sampled(steps, corpus)
    problems += check_trailer(trailer, target)
    for p in problems:
        logging.info(f'check: {p}')
    return problems


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog='macrofuzz.replay',
        description='Check a generated undo/redo fuzz macro against its corpus',
    )
    parser.add_argument('script', help='Generated macro')
    parser.add_argument('corpus', help='File the macro was generated from')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log progress')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        corpus = Corpus.load(args.corpus)
        with open(args.script, encoding=ENCODING, errors=ERRORS, newline='') as f:
            script = f.read()
    except (MacroError, OSError) as e:
        logging.error(e)
        return 1

    problems = check(script, corpus, args.corpus)
    for p in problems:
        print(p)
    return 1 if problems else 0


if __name__ == '__main__':
    sys.exit(main())
