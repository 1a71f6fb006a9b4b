"""Uses the cax language implementation to evaluate .cax files/run in command-line mode. Also uses error handling
context manager. Called from the caxlang console script.
"""

import argparse

from caxlang.lang.error import ErrorHandler
from caxlang.lang.session import Session
from caxlang.lang.shell import Shell


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="caxlang")
    parser.add_argument("file", help="file to evaluate (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--backend", choices=Session.BACKENDS, default="interpreter",
                        help="evaluate with the tree-walking interpreter or the register machine")
    parser.add_argument("--disassemble", action="store_true", help="print bytecode instead of evaluating")
    parser.add_argument("--trace", action="store_true", help="print every chunk the register machine executes")
    return parser.parse_args(argv)


def main(argv=None):
    """Runs cax interpreter. Called from caxlang console script."""
    with ErrorHandler() as error_handler:
        args = parse_args(argv)
        error_handler.verbose = args.trace

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, backend=args.backend)

            if args.disassemble:
                for __, lines in sess.disassemble():
                    print("\n".join(lines))
                return

            sess.run()
            for result in sess.results:
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, backend=args.backend)).cmdloop()


if __name__ == "__main__":
    main()
