"""Forecasting engine components."""

from .critical_path import aggregate_lead_times, dependency_buffer
from .forecaster import ForecastEngine
from .lead_time import calculate_lead_time, target_requirements
from .queue import bucket_counts, forecast_backlog, forecast_item, team_load
from .rollup import ProjectRollupAggregator
from .throughput import bucket_completions, bucketed_throughput, windowed_throughput
from .variance import compare_to_target

__all__ = [
    'ForecastEngine',
    'ProjectRollupAggregator',
    'aggregate_lead_times',
    'bucket_completions',
    'bucket_counts',
    'bucketed_throughput',
    'calculate_lead_time',
    'compare_to_target',
    'dependency_buffer',
    'forecast_backlog',
    'forecast_item',
    'target_requirements',
    'team_load',
    'windowed_throughput',
]
