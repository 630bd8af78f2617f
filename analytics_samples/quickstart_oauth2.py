"""
Google Analytics Data API quickstart using OAuth2 user credentials.

Download an OAuth 2.0 client ID JSON from https://console.cloud.google.com/apis/credentials
for a Desktop or Web client and save it as oauth2.keys.json (or set GA4_OAUTH2_KEYS).
If using a Web client, register http://127.0.0.1:3000/oauth2callback as an authorized
redirect URI.

Usage:
    python -m analytics_samples.quickstart_oauth2 [PROPERTY_ID]
"""
import sys
import logging
import argparse

from .config import get_oauth2_keys_path, get_property_id, load_oauth2_keys, setup_logging
from .data_client import build_simple_report_request, init_data_client, run_report
from .oauth2_flow import get_authenticated_credentials
from .report_printer import print_report_rows

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Run a GA4 report with OAuth2 user credentials')
    parser.add_argument('property_id', nargs='?', help='GA4 property ID (default: GA4_PROPERTY_ID)')
    parser.add_argument('--keys', help='OAuth2 client ID file (default: GA4_OAUTH2_KEYS or oauth2.keys.json)')
    parser.add_argument('--port', type=int, help='Port of the local callback server')
    parser.add_argument('--no-browser', action='store_true', help='Print the consent URL without opening a browser')
    parser.add_argument('--log-level', help='Logging level (default: LOG_LEVEL or INFO)')
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        keys = load_oauth2_keys(get_oauth2_keys_path(args.keys))
        credentials = get_authenticated_credentials(keys, port=args.port, open_browser=not args.no_browser)

        # The data client uses the user credentials obtained above
        # instead of the Application Default Credentials.
        client = init_data_client(credentials=credentials)

        print('Running report')
        response = run_report(client, build_simple_report_request(get_property_id(args.property_id)))
        print_report_rows(response)
    except Exception as e:
        logger.error(f'Error running OAuth2 report: {e}')
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
