from .goal import Goal, ReminderFrequency
from .progress_entry import ProgressEntry
from .streak import Streak
from .reminder import Reminder

__all__ = [
    "Goal",
    "ReminderFrequency",
    "ProgressEntry",
    "Streak",
    "Reminder",
]
