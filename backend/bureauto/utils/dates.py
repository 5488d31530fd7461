from typing import NamedTuple


class TimeDuration(NamedTuple):
    days: int
    hours: int
    minutes: int
    seconds: int


def seconds_to_time_duration(seconds: int | float | str) -> TimeDuration:
    """Split a number of seconds into days, hours, minutes and seconds.

    Negative input counts as zero; fractions are rounded to the nearest second.
    """
    total = max(0, round(float(seconds)))
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return TimeDuration(days, hours, minutes, secs)


def format_duration_pt(duration: TimeDuration) -> str:
    return (
        f"{duration.days} dia(s), {duration.hours} hora(s), "
        f"{duration.minutes} minuto(s), {duration.seconds} segundo(s)"
    )
