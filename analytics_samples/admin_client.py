"""
Google Analytics Admin API client initialization and account listing.
"""
import logging
from typing import List

from google.analytics.admin_v1beta import AnalyticsAdminServiceClient, Account

from .config import get_credentials_path

logger = logging.getLogger(__name__)


def init_admin_client(credentials=None) -> AnalyticsAdminServiceClient:
    """
    Initialize the Admin API client.

    Without explicit credentials the default constructor uses the service account
    from GOOGLE_APPLICATION_CREDENTIALS (or other Application Default Credentials).
    """
    if credentials is not None:
        return AnalyticsAdminServiceClient(credentials=credentials)

    creds_path = get_credentials_path()
    if creds_path:
        logger.info(f'Using service account credentials from {creds_path}')
    else:
        logger.info('GOOGLE_APPLICATION_CREDENTIALS not set, falling back to Application Default Credentials')
    return AnalyticsAdminServiceClient()


def list_accounts(client: AnalyticsAdminServiceClient) -> List[Account]:
    """
    List all Google Analytics accounts available to the authenticated user.

    list_accounts() without arguments returns a pager; iterating it fetches every page.
    """
    pager = client.list_accounts()
    accounts = list(pager)
    logger.info(f'Fetched {len(accounts)} accounts')
    return accounts


if __name__ == '__main__':
    client = init_admin_client()
    print('Admin client initialized:', client)
