class MacroError(Exception):
    """Base class for everything that aborts macro generation"""


class CorpusUnavailable(MacroError):
    def __init__(self, path: str, reason: str = ''):
        self.path = path
        super().__init__(f"can't read corpus {path!r}" + (f": {reason}" if reason else ''))


class CorpusAllEmpty(MacroError):
    def __init__(self):
        super().__init__("corpus has no non-empty lines")


class InvalidArguments(MacroError, ValueError):
    pass


class InvalidStepCount(InvalidArguments):
    def __init__(self, value: object):
        self.value = value
        super().__init__(f"step count must be a non-negative integer, got {value!r}")


class ScriptError(MacroError, ValueError):
    def __init__(self, lineno: int, line: str, reason: str):
        self.lineno = lineno
        self.line = line
        super().__init__(f"line {lineno}: {reason}: {line!r}")
