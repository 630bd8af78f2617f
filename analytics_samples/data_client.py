"""
Google Analytics 4 (GA4) Data API client initialization and report requests.
"""
import logging
from typing import Iterator

from google.analytics.data_v1alpha import AlphaAnalyticsDataClient
from google.analytics.data_v1alpha.types import (
    DateRange as AlphaDateRange,
    Dimension as AlphaDimension,
    Funnel,
    FunnelBreakdown,
    FunnelEventFilter,
    FunnelFieldFilter,
    FunnelFilterExpression,
    FunnelFilterExpressionList,
    FunnelStep,
    RunFunnelReportRequest,
    RunFunnelReportResponse,
    StringFilter,
)
from google.analytics.data_v1beta import BetaAnalyticsDataClient
from google.analytics.data_v1beta.types import (
    DateRange,
    Dimension,
    Metric,
    OrderBy,
    RunReportRequest,
    RunReportResponse,
)

from .config import get_credentials_path

logger = logging.getLogger(__name__)

PAGE_SIZE = 100000


def init_data_client(credentials=None) -> BetaAnalyticsDataClient:
    """
    Initialize GA4 Data API (v1beta) client.

    With no credentials the client uses GOOGLE_APPLICATION_CREDENTIALS / Application
    Default Credentials; OAuth2 user credentials can be passed instead.
    """
    if credentials is None:
        get_credentials_path()
        return BetaAnalyticsDataClient()
    return BetaAnalyticsDataClient(credentials=credentials)


def init_alpha_data_client(credentials=None) -> AlphaAnalyticsDataClient:
    """Initialize GA4 Data API (v1alpha) client, required for funnel reports."""
    if credentials is None:
        get_credentials_path()
        return AlphaAnalyticsDataClient()
    return AlphaAnalyticsDataClient(credentials=credentials)


def build_simple_report_request(property_id: str) -> RunReportRequest:
    """Active users by city since 2020-03-31."""
    return RunReportRequest(
        property=f'properties/{property_id}',
        date_ranges=[DateRange(start_date='2020-03-31', end_date='today')],
        dimensions=[Dimension(name='city')],
        metrics=[Metric(name='activeUsers')],
    )


def build_ordered_report_request(property_id: str) -> RunReportRequest:
    """
    Active users, new users and revenue by date for the last week,
    ordered by total revenue in descending order.
    """
    return RunReportRequest(
        property=f'properties/{property_id}',
        dimensions=[Dimension(name='date')],
        metrics=[
            Metric(name='activeUsers'),
            Metric(name='newUsers'),
            Metric(name='totalRevenue'),
        ],
        date_ranges=[DateRange(start_date='7daysAgo', end_date='today')],
        order_bys=[
            OrderBy(metric=OrderBy.MetricOrderBy(metric_name='totalRevenue'), desc=True)
        ],
    )


def build_paginated_report_request(property_id: str, offset: int = 0, limit: int = PAGE_SIZE) -> RunReportRequest:
    """
    Sessions, key events and revenue by first user source/medium/campaign,
    returning the rows [offset, offset + limit).
    """
    return RunReportRequest(
        property=f'properties/{property_id}',
        date_ranges=[DateRange(start_date='350daysAgo', end_date='yesterday')],
        dimensions=[
            Dimension(name='firstUserSource'),
            Dimension(name='firstUserMedium'),
            Dimension(name='firstUserCampaignName'),
        ],
        metrics=[
            Metric(name='sessions'),
            Metric(name='keyEvents'),
            Metric(name='totalRevenue'),
        ],
        limit=limit,
        offset=offset,
    )


def _event_filter(event_name: str) -> FunnelFilterExpression:
    return FunnelFilterExpression(funnel_event_filter=FunnelEventFilter(event_name=event_name))


def _any_event(*event_names: str) -> FunnelFilterExpression:
    return FunnelFilterExpression(
        or_group=FunnelFilterExpressionList(
            expressions=[_event_filter(name) for name in event_names]
        )
    )


def build_funnel_report_request(property_id: str) -> RunFunnelReportRequest:
    """
    Funnel of the Funnel Exploration template in the Google Analytics UI,
    broken down by device category:

    1. First open/visit (event `first_open` or `first_visit`)
    2. Organic visitors (`firstUserMedium` contains "organic")
    3. Session start (event `session_start`)
    4. Screen/Page view (event `screen_view` or `page_view`)
    5. Purchase (event `purchase` or `in_app_purchase`)

    See https://support.google.com/analytics/answer/9327974
    """
    return RunFunnelReportRequest(
        property=f'properties/{property_id}',
        date_ranges=[AlphaDateRange(start_date='30daysAgo', end_date='today')],
        funnel_breakdown=FunnelBreakdown(
            breakdown_dimension=AlphaDimension(name='deviceCategory')
        ),
        funnel=Funnel(
            steps=[
                FunnelStep(
                    name='First open/visit',
                    filter_expression=_any_event('first_open', 'first_visit'),
                ),
                FunnelStep(
                    name='Organic visitors',
                    filter_expression=FunnelFilterExpression(
                        funnel_field_filter=FunnelFieldFilter(
                            field_name='firstUserMedium',
                            string_filter=StringFilter(
                                match_type=StringFilter.MatchType.CONTAINS,
                                case_sensitive=False,
                                value='organic',
                            ),
                        )
                    ),
                ),
                FunnelStep(
                    name='Session start',
                    filter_expression=_event_filter('session_start'),
                ),
                FunnelStep(
                    name='Screen/Page view',
                    filter_expression=_any_event('screen_view', 'page_view'),
                ),
                FunnelStep(
                    name='Purchase',
                    filter_expression=_any_event('purchase', 'in_app_purchase'),
                ),
            ]
        ),
    )


def run_report(client: BetaAnalyticsDataClient, request: RunReportRequest) -> RunReportResponse:
    logger.info(f'Running report for {request.property} (offset={request.offset}, limit={request.limit})')
    response = client.run_report(request=request)
    logger.info(f'Report returned {len(response.rows)} of {response.row_count} rows')
    return response


def run_funnel_report(client: AlphaAnalyticsDataClient, request: RunFunnelReportRequest) -> RunFunnelReportResponse:
    logger.info(f'Running funnel report for {request.property} with {len(request.funnel.steps)} steps')
    return client.run_funnel_report(request=request)


def iter_report_pages(client: BetaAnalyticsDataClient, request: RunReportRequest,
                      page_size: int = PAGE_SIZE) -> Iterator[RunReportResponse]:
    """
    Yield successive pages of a report by re-issuing the request with a growing offset.

    Stops once the offset reaches the row count reported by the API or a page
    comes back empty. The passed request is not modified.
    """
    offset = request.offset
    while True:
        page_request = RunReportRequest()
        RunReportRequest.copy_from(page_request, request)
        page_request.offset = offset
        page_request.limit = page_size
        response = run_report(client, page_request)
        yield response

        offset += len(response.rows)
        if not response.rows or offset >= response.row_count:
            break
