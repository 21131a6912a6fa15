#!/usr/bin/env python3
"""
Operator commands for the Essay Board data file.

Works directly on the JSON document through the same record store the
API uses, so it can be run while the server is stopped (or, for reads,
while it is running).

Usage:
    python essay_admin.py --data ./db.json init
    python essay_admin.py --data ./db.json list --page 1 --limit 20
    python essay_admin.py --data ./db.json show <essay-id>
    python essay_admin.py --data ./db.json delete <essay-id>
    python essay_admin.py --data ./db.json add-user reader --password secret

If --data is omitted, the configured data file is used (DATA_FILE).
If --password is omitted for add-user, you will be prompted for it.

Exit codes: 0 on success, 1 on storage errors, 2 when the essay does not
exist or the username is taken.
"""

import argparse
import asyncio
import getpass
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from essay_board.app.core.config import get_database_path, settings
from essay_board.app.core.db import JSONStorage, StorageError
from essay_board.app.schemas.essay import EssayRead
from essay_board.app.schemas.user import UserCreate
from essay_board.app.services.essay_service import EssayService
from essay_board.app.services.source_service import classify_source
from essay_board.app.services.user_service import UserService


def _format_timestamp(created_at: int) -> str:
    moment = datetime.fromtimestamp(created_at / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


def _summary_line(essay: EssayRead) -> str:
    by = essay.pseudonym or "anonymous"
    return (
        f"{essay.id}  {_format_timestamp(essay.created_at)}  "
        f"{essay.title!r} by {essay.author} ({classify_source(essay.source)}, posted by {by})"
    )


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Manage the Essay Board data file.")
    ap.add_argument("--data", help="Path to the JSON data file (defaults to DATA_FILE)")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create an empty data file if none exists")

    list_parser = sub.add_parser("list", help="List essays, newest first")
    list_parser.add_argument("--page", type=int, default=1)
    list_parser.add_argument("--limit", type=int, default=20)

    show_parser = sub.add_parser("show", help="Print one essay as JSON")
    show_parser.add_argument("essay_id")

    delete_parser = sub.add_parser("delete", help="Delete an essay")
    delete_parser.add_argument("essay_id")

    user_parser = sub.add_parser("add-user", help="Add a user record")
    user_parser.add_argument("username")
    user_parser.add_argument("--password", help="Password. If omitted, you'll be prompted securely.")

    args = ap.parse_args(argv)
    if args.command == "list" and (args.page < 1 or args.limit < 1):
        ap.error("--page and --limit must be positive")
    return args


async def _run(args: argparse.Namespace, storage: JSONStorage) -> int:
    essays = EssayService(storage)

    if args.command == "init":
        storage.init_db()
        print(f"[+] Data file ready: {storage.path}")
        return 0

    if args.command == "list":
        result = await essays.list_essays(page=args.page, limit=args.limit)
        for essay in result.essays:
            print(_summary_line(essay))
        print(f"[=] {len(result.essays)} shown, {result.total} total")
        return 0

    if args.command == "show":
        essay = await essays.get_essay(args.essay_id)
        if essay is None:
            print(f"[!] No essay with id: {args.essay_id}", file=sys.stderr)
            return 2
        print(json.dumps(essay.model_dump(by_alias=True), ensure_ascii=False, indent=2))
        return 0

    if args.command == "delete":
        if not await essays.delete_essay(args.essay_id):
            print(f"[!] No essay with id: {args.essay_id}", file=sys.stderr)
            return 2
        print(f"[+] Deleted essay: {args.essay_id}")
        return 0

    if args.command == "add-user":
        password = args.password or getpass.getpass("Enter password: ")
        if not password:
            print("[!] Empty password is not allowed.", file=sys.stderr)
            return 2
        try:
            user = await UserService(storage).create_user(UserCreate(username=args.username, password=password))
        except ValueError as exc:
            print(f"[!] {exc}", file=sys.stderr)
            return 2
        print(f"[+] Created user {user.username} ({user.id})")
        return 0

    raise AssertionError(f"unhandled command {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    path = Path(args.data).expanduser() if args.data else get_database_path(settings)
    storage = JSONStorage(path)
    try:
        return asyncio.run(_run(args, storage))
    except StorageError as exc:
        print(f"[!] Storage error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
