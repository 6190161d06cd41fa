from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Self

from .errors import ScriptError


class ArgKind(Enum):
    NONE = 0        # command never takes an argument
    NUMBER = 1      # optional integer, e.g. a repeat count or option value
    STRING = 2      # optional string, the rest of the line


N, S, X = ArgKind.NUMBER, ArgKind.STRING, ArgKind.NONE

# The subset of the editor's command language that we generate.
# Option commands (flags) take an optional number: none toggles, 0/1 sets.
VOCABULARY: dict[str, ArgKind] = {
    'ADJUSTVIEW': S,
    'ATOMICUNDO': S,
    'AUTOCOMPLETE': S,
    'AUTOINDENT': N,
    'AUTOMATCHBRACKET': N,
    'BACKSPACE': N,
    'BINARY': N,
    'CAPITALIZE': N,
    'CENTER': N,
    'COPY': N,
    'CUT': N,
    'DELETECHAR': N,
    'DELETEEOL': X,
    'DELETELINE': N,
    'DELETENEXTWORD': N,
    'DELETEPREVWORD': N,
    'DELTABS': N,
    'ERASE': N,
    'EXIT': X,
    'FIND': S,
    'FINDREGEXP': S,
    'FREEFORM': N,
    'GOTOBOOKMARK': S,
    'GOTOCOLUMN': N,
    'GOTOLINE': N,
    'INSERT': N,
    'INSERTCHAR': N,
    'INSERTLINE': N,
    'INSERTSTRING': S,
    'INSERTTAB': N,
    'LINEDOWN': N,
    'LINEUP': N,
    'MARK': N,
    'MARKVERT': N,
    'MOVEBOS': X,
    'MOVEEOF': X,
    'MOVEEOL': X,
    'MOVEEOW': S,
    'MOVEINCDOWN': X,
    'MOVEINCUP': X,
    'MOVELEFT': N,
    'MOVERIGHT': N,
    'MOVESOF': X,
    'MOVESOL': X,
    'MOVETOS': X,
    'NAMECONVERT': N,
    'NEXTPAGE': N,
    'NEXTWORD': S,
    'OPEN': S,
    'PAGEDOWN': N,
    'PAGEUP': N,
    'PARAGRAPH': N,
    'PASTE': N,
    'PASTEVERT': N,
    'PREVPAGE': N,
    'PREVWORD': S,
    'REDO': N,
    'REPEATLAST': S,
    'REPLACEALL': S,
    'REPLACEONCE': S,
    'RIGHTMARGIN': N,
    'SAVEAS': S,
    'SETBOOKMARK': S,
    'SHIFT': S,
    'SHIFTTABS': N,
    'SYNTAX': S,
    'TABS': N,
    'TABSIZE': N,
    'THROUGH': S,
    'TOGGLESEOF': X,
    'TOGGLESEOL': X,
    'TOLOWER': N,
    'TOUPPER': N,
    'TURBO': N,
    'UNDELLINE': N,
    'UNDO': N,
    'UNSETBOOKMARK': S,
    'UTF8': N,
    'WORDWRAP': N,
}


@dataclass(frozen=True)
class Command:
    """
    A single line of a macro: a keyword and at most one argument.
    String arguments are either bare tokens (e.g. `ADJUSTVIEW TL`)
    or quoted (e.g. `FIND "foo"`).  Quotes inside a quoted string
    are emitted as-is since the editor has no escape syntax for them.
    """
    name: str
    arg: int | str | None = None
    quoted: bool = False

    def __post_init__(self):
        assert self.name in VOCABULARY, f"Command: unknown keyword {self.name}"
        match self.kind:
            case ArgKind.NONE:
                assert self.arg is None, f"{self.name} takes no argument"
            case ArgKind.NUMBER:
                assert self.arg is None or isinstance(self.arg, int), \
                    f"{self.name} expects a number, got {self.arg!r}"
            case ArgKind.STRING:
                assert self.arg is None or isinstance(self.arg, str), \
                    f"{self.name} expects a string, got {self.arg!r}"
        assert not self.quoted or isinstance(self.arg, str), "only strings can be quoted"
        if isinstance(self.arg, str):
            assert '\n' not in self.arg, f"{self.name}: argument spans lines"

    @classmethod
    def number(cls, name: str, n: int) -> Self:
        return cls(name, n)

    @classmethod
    def token(cls, name: str, s: str) -> Self:
        assert s and not s[0].isspace() and s.strip() == s, \
            f"{name}: bare token {s!r} would not survive parsing"
        return cls(name, s)

    @classmethod
    def string(cls, name: str, s: str) -> Self:
        return cls(name, s, quoted=True)

    @property
    def kind(self) -> ArgKind:
        return VOCABULARY[self.name]

    def __str__(self):
        if self.arg is None:
            return self.name
        if self.quoted:
            return f'{self.name} "{self.arg}"'
        return f'{self.name} {self.arg}'

    @classmethod
    def parse(cls, line: str, lineno: int = 0) -> Self:
        """Parse one rendered line back into a Command"""
        line = line.rstrip('\n')
        keyword, _, rest = line.lstrip(' \t').partition(' ')
        name = keyword.upper()
        if name not in VOCABULARY:
            raise ScriptError(lineno, line, 'unknown command')

        rest = rest.lstrip(' \t')
        if not rest:
            return cls(name)

        match VOCABULARY[name]:
            case ArgKind.NONE:
                raise ScriptError(lineno, line, f'{name} takes no argument')
            case ArgKind.NUMBER:
                if not (rest.isascii() and rest.isdigit()):
                    raise ScriptError(lineno, line, f'{name} expects a number')
                return cls(name, int(rest))
            case ArgKind.STRING:
                if rest.startswith('"'):
                    if len(rest) < 2 or not rest.endswith('"'):
                        raise ScriptError(lineno, line, 'unterminated string')
                    return cls(name, rest[1:-1], quoted=True)
                return cls(name, rest)
        raise AssertionError(f"unhandled argument kind for {name}")


def render(commands) -> list[str]:
    return [str(c) for c in commands]


def parse_script(text: str) -> list[Command]:
    """Parse a whole script, skipping blank lines"""
    return [
        Command.parse(line, i+1)
        for i, line in enumerate(text.split('\n'))
        if line.strip()
    ]
