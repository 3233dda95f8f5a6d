"""
Mint a bearer token for a user id (local testing / service accounts):

    python -m scripts.issue_token 3a405225-034c-4eb8-80d0-1cd2b79327a6 --ttl 120
"""
from argparse import ArgumentParser

from services.auth import create_token

if __name__ == "__main__":
    ap = ArgumentParser()
    ap.add_argument("user_id")
    ap.add_argument("--ttl", type=int, default=60, help="minutes")
    args = ap.parse_args()
    print(create_token(args.user_id, ttl_minutes=args.ttl))
