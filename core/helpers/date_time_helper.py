"""
date_time_helper.py

Helper functions for UTC timestamps used by the event log.

All features and modules should use ONLY these helpers for date/time logic.
"""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """
    Returns the current UTC time as an ISO8601 string (YYYY-MM-DDTHH:MM:SS+00:00).
    Used for logging and DB storage.
    """
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def utc_to_local_str(utc_iso: str) -> str:
    """
    Formats a UTC ISO8601 timestamp as a human-readable string in the
    machine's local timezone.

    :param utc_iso: UTC time as ISO string (from DB/logs)
    :return: String in format "YYYY-MM-DD HH:MM:SS" (local time)
    """
    dt_utc = datetime.fromisoformat(utc_iso)
    if dt_utc.tzinfo is None:
        dt_utc = dt_utc.replace(tzinfo=timezone.utc)
    return dt_utc.astimezone().strftime("%Y-%m-%d %H:%M:%S")
