import re
from os import path

import pytest
from macrofuzz import categories
from macrofuzz.categories import commandlist
from macrofuzz.command import Command
from macrofuzz.corpus import Corpus
from macrofuzz.synthesizer import Options, Synthesizer


ALICE = path.join(path.dirname(__file__), 'alice.txt')
alice = Corpus.load(ALICE)


def synth(target: str = ALICE, seed: int = 42, **kwargs) -> Synthesizer:
    return Synthesizer(alice, target, Options(**kwargs), seed)


TABLES = {
    'navigation': categories.NAVIGATION + categories.NAVIGATION_TEXT,
    'flags': categories.FLAGS + categories.FLAGS_TEXT,
    'deletion': categories.DELETION,
    'editing': categories.EDITING,
    'atomic': categories.ATOMIC,
    'text': categories.TEXT,
}


@pytest.mark.parametrize("name", list(TABLES))
def test_tables_render(name: str):
    gen = synth()
    for make in TABLES[name]:
        for _ in range(20):
            for c in commandlist(make(gen)):
                assert Command.parse(str(c)) == c


def test_table_sizes():
    # the full text-mode vocabulary
    assert len(TABLES['navigation']) == 29
    assert len(TABLES['flags']) == 9
    assert len(TABLES['deletion']) == 6
    assert len(TABLES['editing']) == 14
    assert len(TABLES['text']) == 4


def test_commandlist():
    c = Command('EXIT')
    assert commandlist(None) == []
    assert commandlist(c) == [c]
    assert commandlist([c, c]) == [c, c]


def test_clipboard_machine():
    gen = synth()
    seen: set[str] = set()
    quiet = 0
    for _ in range(2000):
        block, clip = gen.state.block_active, gen.state.clipboard_full
        emitted = commandlist(categories.clipboard(gen))
        if not emitted:
            assert not block, "a selection is always closed"
            assert (block, clip) == (gen.state.block_active, gen.state.clipboard_full)
            quiet += 1
            continue
        name = emitted[0].name
        seen.add(name)
        if block:
            assert name in ('COPY', 'CUT', 'ERASE', 'THROUGH')
            assert not gen.state.block_active
            assert gen.state.clipboard_full == (name in ('COPY', 'CUT'))
        elif clip:
            assert name in ('PASTE', 'PASTEVERT')
            assert not gen.state.clipboard_full
        else:
            assert name in ('MARK', 'MARKVERT')
            assert gen.state.block_active
    assert quiet > 0
    assert seen == {'COPY', 'CUT', 'ERASE', 'THROUGH', 'PASTE', 'PASTEVERT', 'MARK', 'MARKVERT'}


def test_find_replace():
    gen = synth()
    kinds: set[str] = set()
    for _ in range(200):
        find, replace = categories.find_replace(gen)
        assert find.name == 'FIND' and find.quoted
        assert replace.name in ('REPLACEALL', 'REPLACEONCE') and replace.quoted
        for c in (find, replace):
            assert c.arg and alice.contains(str(c.arg))
        kinds.add(replace.name)
    assert kinds == {'REPLACEALL', 'REPLACEONCE'}


def test_replace_once_only():
    gen = synth(replace_all=False)
    for _ in range(200):
        _, replace = categories.regexp_replace(gen)
        assert replace.name == 'REPLACEONCE'


def test_regexp_replace():
    gen = synth()
    patterns = {str(categories.regexp_replace(gen)[0].arg) for _ in range(200)}
    assert patterns == set(categories.REPLACE_REGEXPS)


def test_undo_redo():
    gen = synth()
    assert all(
        [str(c) for c in categories.undo_redo(gen)] == ['UNDO 0', 'REDO 0']
        for _ in range(50)
    )
    gen.state.mutation_count = 16
    depths: set[int] = set()
    for _ in range(500):
        undo, redo = categories.undo_redo(gen)
        assert undo.name == 'UNDO' and redo.name == 'REDO' and undo.arg == redo.arg
        depths.add(int(undo.arg or 0))
    assert depths == set(range(5))


def test_shift():
    gen = synth()
    for _ in range(100):
        assert re.fullmatch(r'SHIFT [<>]\d{1,2}[ts]', str(categories.shift(gen)))


@pytest.mark.parametrize("target,expect", [
    ('doc.c', {'*', 'c'}),
    ('dir.d/notes.txt', {'*', 'txt'}),
    ('dir.d/Makefile', {'*'}),
    ('README.MD', {'*'}),
])
def test_syntax(target: str, expect: set[str]):
    gen = synth(target)
    assert {str(categories.syntax(gen).arg) for _ in range(100)} == expect


def test_insert_char():
    gen = synth()
    insert_char = categories.TEXT[0]
    values = {int(commandlist(insert_char(gen))[0].arg or 0) for _ in range(5000)}
    assert min(values) == 1 and max(values) == 126


def test_insert_string():
    gen = synth()
    insert_string = categories.TEXT[2]
    for _ in range(100):
        c, = commandlist(insert_string(gen))
        assert c.name == 'INSERTSTRING' and c.quoted
        assert c.arg in [alice.line(i) for i in range(len(alice))]


def test_goto_line():
    gen = synth()
    lines = {int(categories._goto_line(gen).arg or 0) for _ in range(2000)}
    assert lines == set(range(1, len(alice) + 1))
