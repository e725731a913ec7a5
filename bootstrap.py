"""
One-off admin provisioning.

    python bootstrap.py --email me@example.com --password '...'

Creates the admin account (or re-grants the admin role to an existing one).
Run it once per environment; it is not exposed over HTTP.
"""

import argparse
import logging
import sys

import database
from auth import provision_admin

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Provision the portfolio admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if database.store is None:
        logger.error("DATABASE_URL is not set")
        return 1
    try:
        result = provision_admin(database.store, args.email, args.password)
    except ValueError as e:
        logger.error(str(e))
        return 2
    logger.info(result["message"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
