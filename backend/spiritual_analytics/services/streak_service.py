from datetime import date, timedelta
from typing import AbstractSet, Optional

from spiritual_analytics.models.analytics_report import Streaks


class StreakCalculator:
    """Longest and current runs of consecutive activity days."""

    @staticmethod
    def longest_streak(activity_days: AbstractSet[date]) -> int:
        if not activity_days:
            return 0

        ordered = sorted(activity_days)
        longest = 1
        running = 1
        for previous, current in zip(ordered, ordered[1:]):
            if (current - previous).days == 1:
                running += 1
                longest = max(longest, running)
            else:
                running = 1
        return longest

    @staticmethod
    def current_streak(activity_days: AbstractSet[date], today: date) -> int:
        """
        Length of the run that is still live.

        The run is counted back from today when today has activity. When
        today is empty but yesterday is active, the run ending yesterday
        still counts (one day of grace). Otherwise the streak is 0.
        """
        if today in activity_days:
            anchor = today
        elif today - timedelta(days=1) in activity_days:
            anchor = today - timedelta(days=1)
        else:
            return 0

        streak = 0
        day = anchor
        while day in activity_days:
            streak += 1
            day -= timedelta(days=1)
        return streak

    @staticmethod
    def calculate(activity_days: AbstractSet[date], today: Optional[date] = None) -> Streaks:
        today = today or date.today()
        return Streaks(
            current=StreakCalculator.current_streak(activity_days, today),
            longest=StreakCalculator.longest_streak(activity_days)
        )
