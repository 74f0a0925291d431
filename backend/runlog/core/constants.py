"""Shared goal constants.

Centralizes thresholds and unit conversions used by both the client-side
detectors and the reference API so they can be adjusted in one place.
"""

# Distance of one statute mile in meters
MILE_M = 1609.34

# Kilometers per mile, used when a goal is expressed in km
KM_PER_MILE = MILE_M / 1000

# Progress percentages whose first crossing is worth a notification
MILESTONES = (25, 50, 75, 100)

# Deadline reminders fire once a goal has this many days (or fewer) left
DEFAULT_REMINDER_DAYS = 7

# Days remaining at or below which a deadline becomes urgent / a warning
URGENT_DAYS = 1
WARNING_DAYS = 3

# Goal analytics: a goal is struggling below this progress once more than
# STRUGGLING_TIME_PCT of its window has passed
STRUGGLING_PROGRESS_PCT = 25
STRUGGLING_TIME_PCT = 50

# Percentage points progress may trail elapsed time before a goal is behind schedule
BEHIND_SCHEDULE_MARGIN = 10

# Average progress bounds for the low / high progress suggestions
LOW_PROGRESS_PCT = 30
HIGH_PROGRESS_PCT = 80
