"""
Google Analytics Data API sample: run a funnel report.

See https://developers.google.com/analytics/devguides/reporting/data/v1/rest/v1alpha/properties/runFunnelReport

Usage:
    python -m analytics_samples.run_funnel_report [PROPERTY_ID]
"""
import sys
import logging
import argparse

from .config import get_property_id, setup_logging
from .data_client import build_funnel_report_request, init_alpha_data_client, run_funnel_report
from .report_printer import print_run_funnel_report_response

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Run a GA4 funnel report')
    parser.add_argument('property_id', nargs='?', help='GA4 property ID (default: GA4_PROPERTY_ID)')
    parser.add_argument('--log-level', help='Logging level (default: LOG_LEVEL or INFO)')
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        client = init_alpha_data_client()
        request = build_funnel_report_request(get_property_id(args.property_id))
        response = run_funnel_report(client, request)
        print_run_funnel_report_response(response)
    except Exception as e:
        logger.error(f'Error running funnel report: {e}')
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
