"""Print a bearer token for local testing.

    python -m app.scripts.create_token --company-id 1 --user-id 1 --role admin
"""
import argparse
from datetime import timedelta

from app.core.security import create_access_token


def main():
    parser = argparse.ArgumentParser(description="Mint a development access token")
    parser.add_argument("--company-id", type=int, required=True)
    parser.add_argument("--user-id", type=int, required=True)
    parser.add_argument("--role", default="user")
    parser.add_argument("--email", default=None)
    parser.add_argument("--minutes", type=int, default=None, help="Lifetime override")
    args = parser.parse_args()

    token = create_access_token(
        user_id=args.user_id,
        company_id=args.company_id,
        role=args.role,
        email=args.email,
        expires_delta=timedelta(minutes=args.minutes) if args.minutes else None,
    )
    print(token)


if __name__ == "__main__":
    main()
