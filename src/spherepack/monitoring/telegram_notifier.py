"""Lightweight Telegram notification for batch packing runs.

Sends plain-text messages to a Telegram chat via the Bot API for:
- Batch start
- Trial progress milestones
- Failed trials
- Final results summary

No retry logic; progress updates are non-critical.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: str | None = None,
    token: str | None = None,
) -> bool:
    """Send a plain-text message to a Telegram chat.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.

    Returns:
        True if the message was accepted, False if it was not sent.
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    chat_id = chat_id or os.environ.get("TELEGRAM_CHAT_ID", "")
    if not token or not chat_id:
        logger.debug("Telegram not configured, message dropped")
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.post(url, json=payload)
            data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Telegram notification failed: %s", exc)
        return False
    return bool(data.get("ok", False))


def format_batch_start(
    label: str,
    total_trials: int,
    container_shape: str,
    sphere_types: int,
) -> str:
    """Format batch start notification message.

    Example:
        >>> print(format_batch_start("al_ap", 10, "cuboid", 2))
        Batch Started
        Distribution: al_ap (2 sphere types)
        Container: cuboid
        Trials: 10
    """
    return (
        f"Batch Started\n"
        f"Distribution: {label} ({sphere_types} sphere types)\n"
        f"Container: {container_shape}\n"
        f"Trials: {total_trials}"
    )


def format_trial_milestone(
    trials_completed: int,
    total_trials: int,
    avg_volume_fraction: float,
) -> str:
    """Format trial progress notification.

    Example:
        >>> print(format_trial_milestone(3, 10, 0.3125))
        Progress Update
        Completed: 3/10 trials (30%)
        Avg Volume Fraction: 0.3125
    """
    progress_pct = (trials_completed / total_trials) * 100
    return (
        f"Progress Update\n"
        f"Completed: {trials_completed}/{total_trials} trials ({progress_pct:.0f}%)\n"
        f"Avg Volume Fraction: {avg_volume_fraction:.4f}"
    )


def format_error(error_type: str, error_message: str, context: dict[str, Any] | None = None) -> str:
    """Format error notification message.

    Example:
        >>> print(format_error("PackingError", "no sphere fits", {"trial": 4}))
        Error: PackingError
        no sphere fits
        Context: trial=4
    """
    lines = [
        f"Error: {error_type}",
        error_message,
    ]
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        lines.append(f"Context: {ctx_str}")
    return "\n".join(lines)


def format_final_summary(
    label: str,
    completed_trials: int,
    total_trials: int,
    avg_volume_fraction: float,
    runtime_seconds: float,
    errors: int,
) -> str:
    """Format final batch summary.

    Example:
        >>> print(format_final_summary("al_ap", 9, 10, 0.3, 120, 1))
        Batch Complete
        Distribution: al_ap
        Trials: 9/10
        Avg Volume Fraction: 0.3000
        Runtime: 2.0 minutes
        Errors: 1
    """
    runtime_minutes = runtime_seconds / 60
    return (
        f"Batch Complete\n"
        f"Distribution: {label}\n"
        f"Trials: {completed_trials}/{total_trials}\n"
        f"Avg Volume Fraction: {avg_volume_fraction:.4f}\n"
        f"Runtime: {runtime_minutes:.1f} minutes\n"
        f"Errors: {errors}"
    )
