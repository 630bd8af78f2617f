"""
Google Analytics Data API sample: retrieve a large report in pages.

The report is requested twice, with offset 0 and offset 100000. With --all-pages
the offset keeps advancing until every row has been fetched.

See https://developers.google.com/analytics/devguides/reporting/data/v1/rest/v1beta/properties/runReport#body.request_body.FIELDS.offset

Usage:
    python -m analytics_samples.run_report_with_pagination [PROPERTY_ID] [--all-pages] [--csv report.csv]
"""
import sys
import logging
import argparse

from .config import get_property_id, setup_logging
from .data_client import (
    PAGE_SIZE,
    build_paginated_report_request,
    init_data_client,
    iter_report_pages,
    run_report,
)
from .report_printer import print_run_report_response, write_report_csv

logger = logging.getLogger(__name__)


def run_report_with_pagination(client, property_id: str, all_pages: bool = False) -> list:
    """Fetch and print report pages; returns the responses in order."""
    responses = []
    if all_pages:
        pages = iter_report_pages(client, build_paginated_report_request(property_id), page_size=PAGE_SIZE)
    else:
        # First page, then the same report with a different offset for the second page.
        pages = (
            run_report(client, build_paginated_report_request(property_id, offset=offset))
            for offset in (0, PAGE_SIZE)
        )

    for response in pages:
        print_run_report_response(response)
        responses.append(response)
    return responses


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Run a GA4 report page by page')
    parser.add_argument('property_id', nargs='?', help='GA4 property ID (default: GA4_PROPERTY_ID)')
    parser.add_argument('--all-pages', action='store_true', help='Fetch every page instead of the first two')
    parser.add_argument('--csv', help='Also write all fetched rows to this CSV file')
    parser.add_argument('--log-level', help='Logging level (default: LOG_LEVEL or INFO)')
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        client = init_data_client()
        responses = run_report_with_pagination(client, get_property_id(args.property_id), args.all_pages)
        if args.csv:
            write_report_csv(responses, args.csv)
    except Exception as e:
        logger.error(f'Error running paginated report: {e}')
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
