"""
Tests for GA4 Data API request construction and report calls.
"""
import os
import sys
import unittest
from unittest.mock import patch, MagicMock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from google.analytics.data_v1alpha.types import StringFilter
from google.analytics.data_v1beta.types import (
    DimensionValue,
    MetricValue,
    Row,
    RunReportResponse,
)

from analytics_samples.data_client import (
    build_funnel_report_request,
    build_ordered_report_request,
    build_paginated_report_request,
    build_simple_report_request,
    init_alpha_data_client,
    init_data_client,
    iter_report_pages,
    run_report,
)


def make_response(values, row_count):
    return RunReportResponse(
        rows=[
            Row(dimension_values=[DimensionValue(value=v)], metric_values=[MetricValue(value='1')])
            for v in values
        ],
        row_count=row_count,
    )


class TestReportRequests(unittest.TestCase):

    def test_simple_report(self):
        request = build_simple_report_request('1234')
        self.assertEqual(request.property, 'properties/1234')
        self.assertEqual(request.date_ranges[0].start_date, '2020-03-31')
        self.assertEqual(request.date_ranges[0].end_date, 'today')
        self.assertEqual([d.name for d in request.dimensions], ['city'])
        self.assertEqual([m.name for m in request.metrics], ['activeUsers'])

    def test_ordered_report(self):
        request = build_ordered_report_request('1234')
        self.assertEqual([d.name for d in request.dimensions], ['date'])
        self.assertEqual([m.name for m in request.metrics], ['activeUsers', 'newUsers', 'totalRevenue'])
        self.assertEqual(request.date_ranges[0].start_date, '7daysAgo')
        self.assertEqual(request.date_ranges[0].end_date, 'today')
        self.assertEqual(len(request.order_bys), 1)
        self.assertEqual(request.order_bys[0].metric.metric_name, 'totalRevenue')
        self.assertTrue(request.order_bys[0].desc)

    def test_paginated_report(self):
        request = build_paginated_report_request('1234', offset=100000)
        self.assertEqual(request.date_ranges[0].start_date, '350daysAgo')
        self.assertEqual(request.date_ranges[0].end_date, 'yesterday')
        self.assertEqual(
            [d.name for d in request.dimensions],
            ['firstUserSource', 'firstUserMedium', 'firstUserCampaignName']
        )
        self.assertEqual([m.name for m in request.metrics], ['sessions', 'keyEvents', 'totalRevenue'])
        self.assertEqual(request.limit, 100000)
        self.assertEqual(request.offset, 100000)

    def test_paginated_report_first_page(self):
        self.assertEqual(build_paginated_report_request('1234').offset, 0)


class TestFunnelRequest(unittest.TestCase):

    def setUp(self):
        self.request = build_funnel_report_request('1234')
        self.steps = self.request.funnel.steps

    def test_date_range_and_breakdown(self):
        self.assertEqual(self.request.property, 'properties/1234')
        self.assertEqual(self.request.date_ranges[0].start_date, '30daysAgo')
        self.assertEqual(self.request.date_ranges[0].end_date, 'today')
        self.assertEqual(self.request.funnel_breakdown.breakdown_dimension.name, 'deviceCategory')

    def test_step_order(self):
        self.assertEqual(
            [step.name for step in self.steps],
            ['First open/visit', 'Organic visitors', 'Session start', 'Screen/Page view', 'Purchase']
        )

    def test_or_group_steps(self):
        def events(step):
            return [e.funnel_event_filter.event_name for e in step.filter_expression.or_group.expressions]

        self.assertEqual(events(self.steps[0]), ['first_open', 'first_visit'])
        self.assertEqual(events(self.steps[3]), ['screen_view', 'page_view'])
        self.assertEqual(events(self.steps[4]), ['purchase', 'in_app_purchase'])

    def test_organic_field_filter(self):
        field_filter = self.steps[1].filter_expression.funnel_field_filter
        self.assertEqual(field_filter.field_name, 'firstUserMedium')
        self.assertEqual(field_filter.string_filter.match_type, StringFilter.MatchType.CONTAINS)
        self.assertFalse(field_filter.string_filter.case_sensitive)
        self.assertEqual(field_filter.string_filter.value, 'organic')

    def test_session_start_event(self):
        self.assertEqual(self.steps[2].filter_expression.funnel_event_filter.event_name, 'session_start')


class TestClientInit(unittest.TestCase):

    @patch.dict(os.environ, {}, clear=True)
    @patch('analytics_samples.data_client.BetaAnalyticsDataClient')
    def test_default_credentials(self, mock_client_cls):
        client = init_data_client()
        mock_client_cls.assert_called_once_with()
        self.assertEqual(client, mock_client_cls.return_value)

    @patch('analytics_samples.data_client.BetaAnalyticsDataClient')
    def test_explicit_credentials(self, mock_client_cls):
        credentials = MagicMock()
        init_data_client(credentials=credentials)
        mock_client_cls.assert_called_once_with(credentials=credentials)

    @patch.dict(os.environ, {'GOOGLE_APPLICATION_CREDENTIALS': '/fake/path/credentials.json'})
    @patch('analytics_samples.data_client.AlphaAnalyticsDataClient')
    def test_missing_credentials_file(self, mock_client_cls):
        with self.assertRaises(EnvironmentError):
            init_alpha_data_client()
        mock_client_cls.assert_not_called()


class TestReportPages(unittest.TestCase):

    def test_run_report_passes_request(self):
        client = MagicMock()
        client.run_report.return_value = make_response(['a'], 1)
        request = build_simple_report_request('1234')

        response = run_report(client, request)

        client.run_report.assert_called_once_with(request=request)
        self.assertEqual(response.row_count, 1)

    def test_pages_until_row_count(self):
        client = MagicMock()
        client.run_report.side_effect = [make_response(['a', 'b'], 3), make_response(['c'], 3)]
        request = build_paginated_report_request('1234')

        pages = list(iter_report_pages(client, request, page_size=2))

        self.assertEqual(len(pages), 2)
        offsets = [c.kwargs['request'].offset for c in client.run_report.call_args_list]
        limits = [c.kwargs['request'].limit for c in client.run_report.call_args_list]
        self.assertEqual(offsets, [0, 2])
        self.assertEqual(limits, [2, 2])
        # The caller's request is not modified
        self.assertEqual(request.offset, 0)
        self.assertEqual(request.limit, 100000)

    def test_stops_on_empty_page(self):
        client = MagicMock()
        client.run_report.return_value = make_response([], 10)

        pages = list(iter_report_pages(client, build_paginated_report_request('1234'), page_size=5))

        self.assertEqual(len(pages), 1)
        client.run_report.assert_called_once()


if __name__ == '__main__':
    unittest.main()
