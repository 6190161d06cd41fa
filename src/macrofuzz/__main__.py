# python3 -m macrofuzz [-s SEED] N FILE [BINARY] > macro
#
# The macro only runs to completion in an editor built for testing
# (ne with NE_TEST), which keeps going when a command fails, e.g. when
# moving past the end of the document.  Compare FILE with FILE.undone
# and FILE.test with FILE.redone once it has run.

import argparse
import io
import logging
import sys
from typing import Iterable, TextIO, cast

from .command import Command
from .corpus import Corpus, ENCODING, ERRORS
from .errors import MacroError
from .synthesizer import Options, Synthesizer, parse_step_count


def write_script(cmds: Iterable[Command], out: TextIO):
    for c in cmds:
        out.write(f'{c}\n')


def main(argv: list[str] | None = None, out: TextIO | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog='macrofuzz',
        description='Generate a random undo/redo test macro for the ne editor',
    )
    parser.add_argument('steps', nargs='?', help='Number of random steps')
    parser.add_argument('file', nargs='?', help='Document to edit, also the source of sample text')
    parser.add_argument('binary', nargs='?', help='Any value selects binary-safe commands')
    parser.add_argument('-s', '--seed', type=int, help='Random seed for a reproducible macro')
    parser.add_argument('--turbo', type=int, default=Options.turbo, help='TURBO hint value')
    parser.add_argument('--no-replace-all', action='store_true', help='Only generate REPLACEONCE')
    parser.add_argument('-l', '--log', help='Log to this file rather than stderr')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log progress')
    args = parser.parse_args(argv)

    if args.file is None:
        parser.print_usage()
        return 0

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        filename=args.log,
        filemode='w',
    )

    try:
        options = Options(
            binary=args.binary is not None,
            turbo=args.turbo,
            replace_all=not args.no_replace_all,
        )
        n = parse_step_count(args.steps)
        corpus = Corpus.load(args.file)
        cmds = Synthesizer(corpus, args.file, options, args.seed).generate(n)
    except MacroError as e:
        logging.error(e)
        return 1

    if out is None:
        # corpus bytes go back out unchanged whatever the locale
        cast(io.TextIOWrapper, sys.stdout).reconfigure(encoding=ENCODING, errors=ERRORS)
        out = sys.stdout
    write_script(cmds, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
