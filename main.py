#!/usr/bin/env python3
"""
notekeeper -- command-line access to the notes database.

Talks to the database directly (no HTTP, no tokens). Meant for seeding and
inspecting a local instance.

Usage:
  python main.py notes
  python main.py notes --important
  python main.py notes --not-important
  python main.py add-note "CSS is hard"
  python main.py add-note "GET and POST are the most important methods" --important --user root
  python main.py create-user root --name Superuser

Environment variables:
  DATABASE_URL  SQLAlchemy URL of the database (overridden by --db).
"""

import argparse
import getpass
import sys
from typing import Optional

from sqlalchemy.exc import IntegrityError

from api.models import NOTE_CONTENT_MIN_LENGTH, PASSWORD_MIN_LENGTH, USERNAME_MIN_LENGTH
from auth.passwords import PASSWORD_MAX_BYTES, hash_password, password_too_long
from auth.store import UserStore
from core.config import get_settings
from core.database import create_db_engine
from core.errors import DuplicateUsername
from notes.models import Note
from notes.store import NoteStore


def _print_note(note: Note) -> None:
    flag = "!" if note.important else " "
    print(f"  {flag} {note.id}  {note.content}")


def cmd_notes(note_store: NoteStore, important: Optional[bool]) -> int:
    notes = note_store.list_notes(important=important)
    if not notes:
        print("  No notes found.")
        return 0
    for note in notes:
        _print_note(note)
    return 0


def cmd_add_note(
    user_store: UserStore,
    note_store: NoteStore,
    content: str,
    important: bool,
    username: Optional[str],
) -> int:
    if len(content) < NOTE_CONTENT_MIN_LENGTH:
        print(f"  [!] Note content must be at least {NOTE_CONTENT_MIN_LENGTH} characters.")
        return 1
    user_id = None
    if username is not None:
        user = user_store.get_by_username(username)
        if user is None:
            print(f"  [!] No user named '{username}'.")
            return 1
        user_id = user.id
    try:
        note = note_store.create_note(Note(content=content, important=important, user_id=user_id))
    except IntegrityError:
        # The owner was deleted between the lookup and the insert.
        print(f"  [!] No user named '{username}'.")
        return 1
    print("  note saved!")
    _print_note(note)
    return 0


def cmd_create_user(user_store: UserStore, username: str, name: Optional[str], password: str) -> int:
    if len(username) < USERNAME_MIN_LENGTH:
        print(f"  [!] Username must be at least {USERNAME_MIN_LENGTH} characters.")
        return 1
    if len(password) < PASSWORD_MIN_LENGTH:
        print(f"  [!] Password must be at least {PASSWORD_MIN_LENGTH} characters.")
        return 1
    if password_too_long(password):
        print(f"  [!] Password must be at most {PASSWORD_MAX_BYTES} bytes.")
        return 1
    try:
        user = user_store.create_user(username, name, hash_password(password))
    except DuplicateUsername as exc:
        print(f"  [!] {exc.message}")
        return 1
    print(f"  Created user {user.username} ({user.id}).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notekeeper",
        description="Inspect and seed the notekeeper database.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py notes --not-important
  python main.py add-note "CSS is hard" --user root
  python main.py create-user root --name Superuser
        """,
    )
    parser.add_argument(
        "--db",
        metavar="URL",
        default=None,
        help="SQLAlchemy database URL (default: DATABASE_URL setting)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    notes_cmd = sub.add_parser("notes", help="List notes")
    importance = notes_cmd.add_mutually_exclusive_group()
    importance.add_argument("--important", dest="important", action="store_const", const=True, default=None)
    importance.add_argument("--not-important", dest="important", action="store_const", const=False)

    add_cmd = sub.add_parser("add-note", help="Add a note")
    add_cmd.add_argument("content")
    add_cmd.add_argument("--important", action="store_true")
    add_cmd.add_argument("--user", metavar="USERNAME", default=None, help="Owner of the note")

    user_cmd = sub.add_parser("create-user", help="Register a user (password is prompted)")
    user_cmd.add_argument("username")
    user_cmd.add_argument("--name", default=None)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    engine = create_db_engine(args.db or get_settings().database_url)
    try:
        user_store = UserStore(engine)
        note_store = NoteStore(engine)
        if args.command == "notes":
            return cmd_notes(note_store, args.important)
        if args.command == "add-note":
            return cmd_add_note(user_store, note_store, args.content, args.important, args.user)
        password = getpass.getpass("Password: ")
        return cmd_create_user(user_store, args.username, args.name, password)
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
