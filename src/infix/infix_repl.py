import io
import logging
import traceback

from infix.infix_errors import ParseError, TableError
from infix.infix_lexer import tokenize
from infix.infix_parser import Parser
from infix.infix_precedence import PrecedenceTable

logger = logging.getLogger(__name__)


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def set_verbose(verbose: bool) -> None:
    logging.basicConfig(format="[%(name)s] %(message)s")
    logging.getLogger("infix").setLevel(logging.DEBUG if verbose else logging.WARNING)


def start_repl(precedence: str | None = None, verbose: bool = False) -> None:
    try:
        table = (
            PrecedenceTable.load_from_json(precedence)
            if precedence
            else PrecedenceTable.arithmetic()
        )
    except TableError as e:
        print(f"[error] >>> {e}")
        for problem in e.problems:
            print(f" - {problem}")
        return

    print("Infix REPL. Type 'exit' or 'quit' to leave.")
    naive = False
    set_verbose(verbose)

    while True:
        try:
            src = input(">>> ").strip()
            if src in ("exit", "quit"):
                print("Exiting Infix REPL.")
                return
            if not src or src.startswith("#"):
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                set_verbose(verbose)
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            if src.lower() == "naive-mode":
                naive = not naive
                print(f"[mode] >>> Naive mode {'ON' if naive else 'OFF'}")
                continue
            if src.lower() == "table":
                print(table.report())
                continue

            try:
                tree = Parser(tokenize(src, table), table, naive=naive).parse()
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "depth %d, operands %s", tree.depth(), list(tree.leaves())
                    )
                print(repr(tree))
            except ParseError as e:
                print(f"[error] >>> {e}")
            except Exception:
                print_traceback()

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Infix REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
