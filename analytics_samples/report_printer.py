"""
Console output for Admin API accounts and Data API report responses.
"""
import logging
from typing import Iterable, List, Union

import pandas as pd
from google.analytics.data_v1beta.types import MetricType, RunReportResponse

logger = logging.getLogger(__name__)


def print_accounts(accounts, file=None) -> None:
    print('Accounts:', file=file)
    for account in accounts:
        print('Account name:', account.name, file=file)
        print('Display name:', account.display_name, file=file)
        print('Region code:', account.region_code, file=file)
        print('Create time:', account.create_time, file=file)
        print('Update time:', account.update_time, file=file)


def print_report_rows(response, file=None) -> None:
    """Print the first dimension and metric value of every row."""
    print('Report result:', file=file)
    for row in response.rows:
        print(row.dimension_values[0].value, row.metric_values[0].value, file=file)


def print_run_report_response(response, file=None) -> None:
    """Prints results of a runReport call."""
    print(f'{response.row_count} rows received', file=file)
    for dimension_header in response.dimension_headers:
        print(f'Dimension header name: {dimension_header.name}', file=file)
    for metric_header in response.metric_headers:
        metric_type = MetricType(metric_header.type_).name
        print(f'Metric header name: {metric_header.name} ({metric_type})', file=file)

    print('Report result:', file=file)
    for row in response.rows:
        print(f'{row.dimension_values[0].value}, {row.metric_values[0].value}', file=file)


def print_funnel_sub_report(funnel_sub_report, file=None) -> None:
    """Prints contents of a FunnelSubReport object."""
    print('Dimension headers:', file=file)
    for dimension_header in funnel_sub_report.dimension_headers:
        print(dimension_header.name, file=file)

    print('\nMetric headers:', file=file)
    for metric_header in funnel_sub_report.metric_headers:
        print(metric_header.name, file=file)

    print('\nDimensions and metric values for each row in the report:', file=file)
    for row_index, row in enumerate(funnel_sub_report.rows):
        print(f'\nRow #{row_index}', file=file)
        for dimension_index, dimension_value in enumerate(row.dimension_values):
            dimension_name = funnel_sub_report.dimension_headers[dimension_index].name
            print(f'\n{dimension_name}: {dimension_value.value}', file=file)
        for metric_index, metric_value in enumerate(row.metric_values):
            metric_name = funnel_sub_report.metric_headers[metric_index].name
            print(f'\n{metric_name}: {metric_value.value}', file=file)

    print('\nSampling metadata for each date range:', file=file)
    for metadata_index, metadata in enumerate(funnel_sub_report.metadata.sampling_metadatas):
        print(
            f'Sampling metadata for date range #{metadata_index}: '
            f'samplesReadCount={metadata.samples_read_count}, '
            f'samplingSpaceSize={metadata.sampling_space_size}',
            file=file
        )


def print_run_funnel_report_response(response, file=None) -> None:
    """Prints results of a runFunnelReport call."""
    print('Report result:', file=file)
    print('=== FUNNEL VISUALIZATION ===', file=file)
    print_funnel_sub_report(response.funnel_visualization, file=file)

    print('=== FUNNEL TABLE ===', file=file)
    print_funnel_sub_report(response.funnel_table, file=file)


def report_to_dataframe(responses: Union[RunReportResponse, Iterable[RunReportResponse]]) -> pd.DataFrame:
    """
    Flatten one or more pages of a runReport response into a DataFrame.

    Columns are the dimension header names followed by the metric header names,
    taken from the first page. Values are kept as the strings returned by the API.
    """
    if isinstance(responses, RunReportResponse):
        responses = [responses]

    columns: List[str] = []
    records: List[List[str]] = []
    for response in responses:
        if not columns:
            columns = [h.name for h in response.dimension_headers] + [h.name for h in response.metric_headers]
        for row in response.rows:
            records.append([v.value for v in row.dimension_values] + [v.value for v in row.metric_values])

    return pd.DataFrame(records, columns=columns)


def write_report_csv(responses, path: str) -> pd.DataFrame:
    df = report_to_dataframe(responses)
    df.to_csv(path, index=False)
    logger.info(f'Wrote {len(df)} rows to {path}')
    return df
