import io
import sys
from os import path

from macrofuzz.__main__ import main
from macrofuzz.synthesizer import Options, generate


ALICE = path.join(path.dirname(__file__), 'alice.txt')


def run(*argv: str) -> tuple[int, list[str]]:
    out = io.StringIO()
    status = main(list(argv), out)
    return status, out.getvalue().splitlines()


def test_usage(capsys):
    assert run() == (0, [])
    assert run('10') == (0, [])
    assert capsys.readouterr().out.count('usage: macrofuzz') == 2


def test_generate():
    status, lines = run('200', ALICE, '-s', '3')
    assert status == 0
    assert lines == generate(200, ALICE, seed=3)
    assert lines[0] == f'OPEN "{ALICE}"'
    assert lines[-1] == 'EXIT'


def test_binary():
    status, lines = run('200', ALICE, 'BINARY', '--seed', '3')
    assert status == 0
    assert lines == generate(200, ALICE, Options(binary=True), seed=3)
    assert lines[:3] == ['BINARY', f'OPEN "{ALICE}"', 'TURBO 10000']


def test_options():
    status, lines = run('--turbo', '77', '--no-replace-all', '-s', '1', '2000', ALICE)
    assert status == 0
    assert 'TURBO 77' in lines
    assert any(line.startswith('REPLACEONCE') for line in lines)
    assert not any(line.startswith('REPLACEALL') for line in lines)


def test_errors(tmp_path):
    assert run('many', ALICE) == (1, [])
    assert run('-5', ALICE) == (1, [])
    assert run('10', str(tmp_path / 'missing.txt')) == (1, [])
    assert run('--turbo', '0', '10', ALICE) == (1, [])

    empty = tmp_path / 'empty.txt'
    empty.write_text('\n\n')
    assert run('10', str(empty)) == (1, [])
    assert run('0', str(empty))[0] == 0


def test_sparse_corpus(tmp_path):
    sparse = tmp_path / 'sparse.txt'
    sparse.write_text('\n' * 200000 + 'x\n')
    status, lines = run('200', str(sparse), '-s', '1')
    assert status == 0
    assert lines[-6:] == [
        f'SAVEAS "{sparse}.test"',
        'UNDO 10000000',
        f'SAVEAS "{sparse}.undone"',
        'REDO 10000000',
        f'SAVEAS "{sparse}.redone"',
        'EXIT',
    ]
    assert 'INSERTSTRING "x"' in lines


def test_output_bytes(tmp_path, monkeypatch):
    # the macro must carry the corpus bytes even when stdout isn't utf-8
    doc = tmp_path / 'doc.txt'
    doc.write_bytes('café crème\n'.encode('utf-8') + b'\xffbin\n')
    stdout = io.TextIOWrapper(io.BytesIO(), encoding='latin-1')
    monkeypatch.setattr(sys, 'stdout', stdout)

    assert main(['300', str(doc), '-s', '1']) == 0
    stdout.flush()
    raw = stdout.buffer.getvalue()
    assert 'INSERTSTRING "café crème"\n'.encode('utf-8') in raw
    assert b'INSERTSTRING "\xffbin"\n' in raw
    assert 'café'.encode('latin-1') not in raw
