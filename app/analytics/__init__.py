"""Weight statistics and goal engine. Pure functions, no I/O"""
from app.analytics.calendar_grid import build_month_grid, project_records
from app.analytics.planner import plan_goal, project_path, validate_goal_input
from app.analytics.progress import compute_progress, summarize_weights
from app.analytics.record_list import filter_records, records_to_csv, sort_records, with_changes
from app.analytics.trend import analyze_trend, regression_line

__all__ = [
    "analyze_trend",
    "build_month_grid",
    "compute_progress",
    "filter_records",
    "plan_goal",
    "project_path",
    "project_records",
    "records_to_csv",
    "regression_line",
    "sort_records",
    "summarize_weights",
    "validate_goal_input",
    "with_changes",
]
