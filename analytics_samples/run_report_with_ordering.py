"""
Google Analytics Data API sample: order report rows by total revenue.

See https://developers.google.com/analytics/devguides/reporting/data/v1/rest/v1beta/properties/runReport#body.request_body.FIELDS.order_bys

Usage:
    python -m analytics_samples.run_report_with_ordering [PROPERTY_ID] [--csv report.csv]
"""
import sys
import logging
import argparse

from .config import get_property_id, setup_logging
from .data_client import build_ordered_report_request, init_data_client, run_report
from .report_printer import print_run_report_response, write_report_csv

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Run a GA4 report ordered by total revenue')
    parser.add_argument('property_id', nargs='?', help='GA4 property ID (default: GA4_PROPERTY_ID)')
    parser.add_argument('--csv', help='Also write the report rows to this CSV file')
    parser.add_argument('--log-level', help='Logging level (default: LOG_LEVEL or INFO)')
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        client = init_data_client()
        response = run_report(client, build_ordered_report_request(get_property_id(args.property_id)))
        print_run_report_response(response)
        if args.csv:
            write_report_csv(response, args.csv)
    except Exception as e:
        logger.error(f'Error running ordered report: {e}')
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
