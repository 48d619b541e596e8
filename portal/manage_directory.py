"""
Manage directory users from the command line.
Usage: python -m portal.manage_directory add alice --context sales
       python -m portal.manage_directory disable alice
"""
import argparse
import getpass
import sys

from sqlalchemy.exc import IntegrityError

from Security.security_config import SECURITY_SETTINGS

from .database import build_engine, build_session_factory, init_db
from .directory import create_directory_user, set_user_active
from .models import DEFAULT_PROFILE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portal.manage_directory")
    parser.add_argument("--database-url", default=SECURITY_SETTINGS["DATABASE_URL"])
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="create directory tables")

    add = sub.add_parser("add", help="add a directory user")
    add.add_argument("username")
    add.add_argument("--context", default="")
    add.add_argument("--profile", default=DEFAULT_PROFILE)
    add.add_argument("--display-name")
    add.add_argument("--password", help="read from the terminal when omitted")

    for name, help_text in (("disable", "disable a user"), ("enable", "re-enable a user")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("username")
        cmd.add_argument("--profile")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    engine = build_engine(args.database_url)
    init_db(engine)
    if args.command == "init":
        print("Directory tables ready.")
        return 0

    db = build_session_factory(engine)()
    try:
        if args.command == "add":
            password = args.password or getpass.getpass(f"Password for {args.username}: ")
            if not password:
                print("Password must not be empty.", file=sys.stderr)
                return 2
            try:
                user = create_directory_user(
                    db,
                    args.username,
                    password,
                    context=args.context,
                    profile=args.profile,
                    display_name=args.display_name,
                )
            except IntegrityError:
                db.rollback()
                print(f"User {args.username} already exists in that context.", file=sys.stderr)
                return 1
            print(f"Added {user.username} (id={user.id}, profile={user.profile}).")
            return 0

        changed = set_user_active(db, args.username, args.command == "enable", profile=args.profile)
        if not changed:
            print(f"No user named {args.username}.", file=sys.stderr)
            return 1
        print(f"{args.command.capitalize()}d {changed} user(s).")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
