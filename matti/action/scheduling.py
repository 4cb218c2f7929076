from datetime import datetime, time, timedelta

# Offsets in days after the action was created.
CHAT_FOLLOW_UP_INTERVALS: list[int] = [2, 4, 7, 10, 14, 21]
# Goal steps get at most two reminders while they are the active step.
GOAL_FOLLOW_UP_INTERVALS: list[int] = [2, 4]
GOAL_FOLLOW_UP_TIME = time(hour=18)


def follow_up_dates(start: datetime, intervals: list[int], at: time | None = None) -> list[datetime]:
    """
    Absolute follow-up timestamps for `intervals` days after `start`.
    With `at`, each date is moved to that wall-clock time in `start`'s timezone.
    """
    dates = []
    for days in intervals:
        scheduled = start + timedelta(days=days)
        if at is not None:
            scheduled = scheduled.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)
        dates.append(scheduled)
    return dates
