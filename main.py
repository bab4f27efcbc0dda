import argparse
import logging
import sys

from chgit.commands import map_command
from chgit.errors import ChgitError, UsageError


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="chgit", description="Chgit CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # init command
    subparsers.add_parser("init", help="Initialize a new chgit repository")

    # add command
    add_parser = subparsers.add_parser("add", help="Add a file or directory to staging")
    add_parser.add_argument("path", help="File or directory to add")

    # status command
    subparsers.add_parser("status", help="Show the staged files")

    # commit command
    commit_parser = subparsers.add_parser("commit", help="Commit staged changes")
    commit_parser.add_argument("-m", "--message", required=True, help="Commit message")

    # log command
    subparsers.add_parser("log", help="Show commit logs, newest first")

    # checkout command
    checkout_parser = subparsers.add_parser("checkout", help="Restore the files of a commit")
    checkout_parser.add_argument("commit", help="Commit hash or unique prefix")

    # verify command
    subparsers.add_parser("verify", help="Check that the history chain is consistent")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        print(parser.format_usage(), end="", file=sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        map_command(args.command)(args)
    except ChgitError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1 if e.fatal else 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
