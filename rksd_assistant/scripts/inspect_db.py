#!/usr/bin/env python3
"""
Inspect the assistant database: print rows from the college_info, chat_messages
and users tables.

Usage:
  python -m rksd_assistant.scripts.inspect_db [--limit N]

Notes:
- Uses the existing SQLAlchemy session and models.
- Safe read-only inspection; makes no writes. Passwords are never printed.
"""

from __future__ import annotations

import argparse
from datetime import datetime

from ..data.database import SessionLocal
from ..data.models import ChatMessage, CollegeInfo, User


def line(ch: str = "-", width: int = 60) -> str:
    return ch * width


def print_college_info(session):
    print(line("="))
    print("College info")
    print(line("="))
    facts = session.query(CollegeInfo).order_by(CollegeInfo.category).all()
    print(f"Total facts: {len(facts)}")
    for f in facts:
        print(f"- [{f.category}] {f.title}: {f.content}")
        if f.info_metadata:
            print(f"    metadata={f.info_metadata}")
    print()


def print_chat_messages(session, limit: int):
    print(line("="))
    print(f"Chat messages (latest {limit})")
    print(line("="))
    total = session.query(ChatMessage).count()
    rows = session.query(ChatMessage).order_by(ChatMessage.timestamp.desc()).limit(limit).all()
    print(f"Total messages: {total}")
    for m in reversed(rows):
        ts = m.timestamp.strftime("%Y-%m-%d %I:%M %p") if m.timestamp else "N/A"
        print(f"- {ts} {m.role} ({m.language or '?'}): {m.content}")
    print()


def print_users(session):
    print(line("="))
    print("Users")
    print(line("="))
    users = session.query(User).order_by(User.username).all()
    print(f"Total users: {len(users)}")
    for u in users:
        print(f"- {u.id} {u.username}")
    print()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Print the assistant database contents.")
    parser.add_argument("--limit", type=int, default=50, help="number of recent chat messages to show")
    args = parser.parse_args(argv)

    session = SessionLocal()
    try:
        print(f"DB Inspection — {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print_college_info(session)
        print_chat_messages(session, args.limit)
        print_users(session)
        print(line("="))
        print("End of database inspection")
        print(line("="))
    finally:
        session.close()


if __name__ == "__main__":
    main()
