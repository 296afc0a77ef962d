#!/usr/bin/env python3
"""Print a signed Jobly API token for local development."""

from __future__ import annotations

import argparse

from jobly.core.config import get_settings
from jobly.core.security import create_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Sign a Jobly API bearer token with JOBLY_SECRET_KEY.")
    parser.add_argument("--username", required=True, help="Value of the username claim")
    parser.add_argument(
        "--admin",
        action="store_true",
        help="Set the isAdmin claim to true",
    )
    parser.add_argument(
        "--header",
        action="store_true",
        help="Print a complete Authorization header instead of the bare token",
    )
    args = parser.parse_args()

    token = create_token(args.username, is_admin=args.admin, settings=get_settings())
    print(f"Authorization: Bearer {token}" if args.header else token)


if __name__ == "__main__":
    main()
