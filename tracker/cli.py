"""Command-line access to accounts, weeks and progress.

Usage:
    python -m tracker.cli register --name Ana --email ana@example.com
    python -m tracker.cli progress --email ana@example.com
    python -m tracker.cli weeks --email ana@example.com --limit 12
    python -m tracker.cli share --email ana@example.com
    python -m tracker.cli new-week --email ana@example.com [--template 1]
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from typing import Any

from workout_engine.share import build_week_share_summary
from workout_engine.templates import load_templates
from workout_store import UserRecord, WorkoutStore, WorkoutStoreError

from tracker.config import LOG_LEVEL, MONGODB_DB, MONGODB_URI, TEMPLATES_PATH

logger = logging.getLogger(__name__)


def build_store() -> WorkoutStore:
    """Connect using the environment configuration."""
    templates = load_templates(TEMPLATES_PATH) if TEMPLATES_PATH else None
    store = WorkoutStore.from_uri(MONGODB_URI, MONGODB_DB, templates=templates)
    store.ensure_indexes()
    return store


def _require_user(store: WorkoutStore, email: str) -> UserRecord:
    user = store.find_user_by_email(email)
    if user is None:
        raise WorkoutStoreError(f"No account for {email}", status_code=404)
    return user


def cmd_register(store: WorkoutStore, args: argparse.Namespace) -> Any:
    password = args.password or getpass.getpass("Password: ")
    return {"user": store.register(args.name, args.email, password).to_dict()}


def cmd_progress(store: WorkoutStore, args: argparse.Namespace) -> Any:
    user = _require_user(store, args.email)
    return store.get_progress(user.id).to_dict()


def cmd_weeks(store: WorkoutStore, args: argparse.Namespace) -> Any:
    user = _require_user(store, args.email)
    return {"weeks": [w.to_dict() for w in store.list_weeks(user.id, limit=args.limit)]}


def cmd_share(store: WorkoutStore, args: argparse.Namespace) -> Any:
    user = _require_user(store, args.email)
    return build_week_share_summary(store.get_active_week(user.id))


def cmd_new_week(store: WorkoutStore, args: argparse.Namespace) -> Any:
    user = _require_user(store, args.email)
    active = store.get_active_week(user.id)
    week = store.start_new_week(
        user.id,
        active.id,
        [d.to_dict() for d in active.days],
        template_index=args.template,
    )
    return {"week": week.to_dict()}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fitmotion workout tracker")
    sub = parser.add_subparsers(dest="command", required=True)

    register = sub.add_parser("register", help="Create an account")
    register.add_argument("--name", required=True)
    register.add_argument("--email", required=True)
    register.add_argument("--password", help="Prompted for when omitted")
    register.set_defaults(handler=cmd_register)

    progress = sub.add_parser("progress", help="Print progress statistics as JSON")
    progress.add_argument("--email", required=True)
    progress.set_defaults(handler=cmd_progress)

    weeks = sub.add_parser("weeks", help="List saved weeks, newest first")
    weeks.add_argument("--email", required=True)
    weeks.add_argument("--limit", type=int, default=None)
    weeks.set_defaults(handler=cmd_weeks)

    share = sub.add_parser("share", help="Print a text summary of the active week")
    share.add_argument("--email", required=True)
    share.set_defaults(handler=cmd_share)

    new_week = sub.add_parser("new-week", help="Archive the active week and start the next")
    new_week.add_argument("--email", required=True)
    new_week.add_argument("--template", type=int, default=None, help="Template index")
    new_week.set_defaults(handler=cmd_new_week)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        store = build_store()
        output = args.handler(store, args)
    except WorkoutStoreError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1

    if isinstance(output, str):
        print(output)
    else:
        print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
