"""Send one notification to a member (or topic) from the command line.

Uses the configured database and Firebase credentials, so the member must
already exist and have subscribed a device for a push to go out. The inbox
record is written either way.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from clubhub.auth.session import AUTOMATION_USER_ID, Principal
from clubhub.database import AsyncSessionLocal, engine
from clubhub.exceptions import ClubhubError
from clubhub.logging_config import configure_logging
from clubhub.services.dispatch import DispatchService, PushMessage
from clubhub.services.push import FirebasePushProvider


async def send(args: argparse.Namespace) -> int:
    message = PushMessage(
        title=args.title,
        body=args.body,
        url=args.url,
        tag=args.tag,
        category=args.category,
        data=json.loads(args.data) if args.data else {},
    )
    principal = Principal(user_id=AUTOMATION_USER_ID, role="admin")

    try:
        async with AsyncSessionLocal() as session:
            service = DispatchService(session, FirebasePushProvider.from_settings(), principal)
            result = await service.send(message, user_ids=args.user_id, topic=args.topic)
    except ClubhubError as e:
        print(f"Send failed: {e.message}", file=sys.stderr)
        return 1
    finally:
        await engine.dispose()

    print(json.dumps(result.to_summary(), indent=2))
    return 0 if not result.failed else 2


def main() -> int:
    parser = argparse.ArgumentParser(description="Send a test push notification")
    parser.add_argument(
        "--user-id",
        action="append",
        default=None,
        help="Recipient member id (repeatable)",
    )
    parser.add_argument("--topic", default=None, help="Broadcast to a provider topic")
    parser.add_argument("--title", default="Test notification")
    parser.add_argument("--body", default="Push delivery is working.")
    parser.add_argument("--url", default=None, help="Path opened on click")
    parser.add_argument("--tag", default=None)
    parser.add_argument(
        "--category",
        choices=["events", "projects", "admin"],
        default=None,
        help="Category checked against member preferences",
    )
    parser.add_argument("--data", default=None, help="Extra data payload as a JSON object")
    parser.add_argument("--verbose", action="store_true", help="Log at debug level")

    args = parser.parse_args()
    if not args.user_id and not args.topic:
        parser.error("provide --user-id or --topic")

    configure_logging("DEBUG" if args.verbose else None)
    return asyncio.run(send(args))


if __name__ == "__main__":
    raise SystemExit(main())
