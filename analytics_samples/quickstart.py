"""
Google Analytics Admin API quickstart: list the accounts available to a service account.

Before running, point GOOGLE_APPLICATION_CREDENTIALS to a service account key file
that has access to at least one Google Analytics account.

Usage:
    python -m analytics_samples.quickstart
"""
import sys
import logging
import argparse

from .admin_client import init_admin_client, list_accounts
from .config import setup_logging
from .report_printer import print_accounts

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='List Google Analytics accounts using the Admin API')
    parser.add_argument('--log-level', help='Logging level (default: LOG_LEVEL or INFO)')
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        client = init_admin_client()
        accounts = list_accounts(client)
        print_accounts(accounts)
    except Exception as e:
        logger.error(f'Error listing accounts: {e}')
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
