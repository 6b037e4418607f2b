"""Kwetu Store management CLI.

Creates and drops database schemas for all domains, and grants the admin
role to an existing user.

Usage:
    python src/manage.py setup-db                       # Create all tables
    python src/manage.py drop-db --domain store         # Drop one domain's tables
    python src/manage.py grant-admin --email a@b.com    # Make a user an admin
"""

import argparse
import sys

DOMAIN_NAMES = ["identity", "store", "support"]


def _domains():
    from identity.domain import identity
    from store.domain import store
    from support.domain import support

    return {"identity": identity, "store": store, "support": support}


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    all_domains = _domains()
    targets = {d: all_domains[d] for d in domains} if domains else all_domains

    for name, domain in targets.items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    all_domains = _domains()
    targets = {d: all_domains[d] for d in domains} if domains else all_domains

    for name, domain in targets.items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def grant_admin(email):
    """Grant the admin role to the user registered under ``email``."""
    from identity.account.roles import GrantAdminRole
    from identity.domain import identity
    from protean.exceptions import ValidationError

    identity.init()
    with identity.domain_context():
        try:
            role_id = identity.process(GrantAdminRole(email=email), asynchronous=False)
        except ValidationError as exc:
            print(f"Failed: {exc.messages}")
            return 1

    print(f"{email} is now an admin (role {role_id}).")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Kwetu Store management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    grant_parser = subparsers.add_parser("grant-admin", help="Grant the admin role to a user")
    grant_parser.add_argument("--email", required=True, help="Email the user signed up with")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "grant-admin":
        sys.exit(grant_admin(args.email))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
