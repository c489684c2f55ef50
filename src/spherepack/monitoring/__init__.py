"""Monitoring module for spherepack.

Provides metrics tracking and Telegram notifications for batch packing runs.
"""

from .metrics import (
    BatchMetrics,
    TrialMetrics,
    export_to_csv,
    export_to_json,
    format_summary,
)
from .telegram_notifier import (
    format_batch_start,
    format_error,
    format_final_summary,
    format_trial_milestone,
    send_telegram,
)

__all__ = [
    # Metrics
    "BatchMetrics",
    "TrialMetrics",
    "export_to_csv",
    "export_to_json",
    "format_summary",
    # Telegram
    "send_telegram",
    "format_batch_start",
    "format_trial_milestone",
    "format_error",
    "format_final_summary",
]
