"""
Playlist command builders.

The device parses these strings literally, so parameter names, comma
separators and quoting must stay exactly as written here.
"""

from datetime import datetime, timezone
from typing import Optional, Union

Number = Union[int, float]


def format_start(time: Union[datetime, Number]) -> str:
    """
    Format a point in time as a device start time.

    Args:
        time: Aware datetime (converted to UTC), naive datetime (taken as
              UTC) or epoch seconds.

    Returns:
        'MM/DD/YYYY HH:MM:SS:00', e.g. '02/05/2025 14:15:00:00'
    """
    if isinstance(time, datetime):
        if time.tzinfo is None:
            time = time.replace(tzinfo=timezone.utc)
        else:
            time = time.astimezone(timezone.utc)
    else:
        time = datetime.fromtimestamp(time, tz=timezone.utc)
    return (
        f"{time.month:02d}/{time.day:02d}/{time.year:04d} "
        f"{time.hour:02d}:{time.minute:02d}:{time.second:02d}:00"
    )


def format_number(value) -> str:
    """Render a duration the way the device expects (1950, not 1950.0)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def has_logo(tag) -> bool:
    """A logo tag is sent unless it is missing, empty, 0 or "0"."""
    if tag is None or isinstance(tag, bool):
        return False
    if isinstance(tag, (int, float)):
        return tag != 0
    return tag not in ('', '0')


def _pres_params(flavor: str, duration, presentation_id, tag=None) -> str:
    params = (
        f"Flavor={flavor},Duration={format_number(duration)},"
        f"PresentationId={presentation_id}"
    )
    if has_logo(tag):
        params += f",Logo={tag}"
    return params


def _start_param(start_time: Optional[str]) -> str:
    return f",StartTime={start_time}" if start_time is not None else ""


def load_command(flavor: str, duration, presentation_id, tag=None) -> str:
    """loadPres("Flavor=<f>,Duration=<d>,PresentationId=<id>[,Logo=<tag>]")"""
    return f'loadPres("{_pres_params(flavor, duration, presentation_id, tag)}")'


def load_run_command(flavor: str, duration, presentation_id, tag=None) -> str:
    """loadRunPres("Flavor=<f>,Duration=<d>,PresentationId=<id>[,Logo=<tag>]")"""
    return f'loadRunPres("{_pres_params(flavor, duration, presentation_id, tag)}")'


def run_command(presentation_id, start_time: Optional[str] = None) -> str:
    """runPres("PresentationId=<id>[,StartTime=<time>]")"""
    return f'runPres("PresentationId={presentation_id}{_start_param(start_time)}")'


def cancel_command(presentation_id, start_time: Optional[str] = None) -> str:
    """cancelPres("PresentationId=<id>[,StartTime=<time>]")"""
    return f'cancelPres("PresentationId={presentation_id}{_start_param(start_time)}")'
