"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60

# Attendance window
PRE_CLASS_GRACE_MINUTES = 10
INSTANT_LESSON_HORIZON_HOURS = 24
DEFAULT_ATTENDANCE_WINDOW_MINUTES = 30

# Lesson validation bounds
MIN_DURATION_MINUTES = 15
MAX_DURATION_MINUTES = 480
MIN_LESSON_COUNT = 1
MAX_LESSON_COUNT = 5
MIN_ATTENDANCE_WINDOW_MINUTES = 5
MAX_SUBJECT_LENGTH = 100

DEFAULT_LESSON_DURATION_MINUTES = 60
DEFAULT_LESSON_GAP_MINUTES = 10
DEFAULT_INSTANT_LOCATION = "Default Location"

# Reports
LOW_ATTENDANCE_RATE = 70.0
LOW_ATTENDANCE_MIN_RECORDS = 3
CLASS_STATS_MIN_RECORDS = 10
LOWEST_CLASSES_LIMIT = 5

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 100
