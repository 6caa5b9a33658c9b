"""
API Call Counter - daily call budget for the routing provider
"""
from datetime import date
from typing import Callable, Dict, Optional


class APICounter:
    """API call counter"""

    def __init__(self, max_calls_per_day: int, today: Optional[Callable[[], date]] = None):
        self.max_calls_per_day = max_calls_per_day
        self._today = today or date.today
        self.call_count: Dict[str, int] = {}
        self.current_date = self._today()

    def _roll_over(self) -> str:
        today = self._today()

        # Reset counter if date changes
        if today != self.current_date:
            self.call_count.clear()
            self.current_date = today

        return today.isoformat()

    def can_make_call(self) -> bool:
        """Check if API can be called"""
        today_key = self._roll_over()
        return self.call_count.get(today_key, 0) < self.max_calls_per_day

    def record_call(self) -> None:
        """Record one API call"""
        today_key = self._roll_over()
        self.call_count[today_key] = self.call_count.get(today_key, 0) + 1

    def get_remaining_calls(self) -> int:
        """Get remaining call count"""
        today_key = self._roll_over()
        return max(0, self.max_calls_per_day - self.call_count.get(today_key, 0))
