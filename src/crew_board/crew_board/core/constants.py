"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TAX_RATE = 0.033
CLOCK_IN_WINDOW_MINUTES = 15
NEXT_SCHEDULE_LOOKBACK_MINUTES = 60

PIN_LENGTH = 4
PHONE_SUFFIX_LENGTH = 4

DEFAULT_WAGE = {"basic": 10320, "responsibility": 0, "incentive": 0, "special": 140}
DEFAULT_HOLIDAY_EXTRA_PAY = 1000
DEFAULT_REQUEST_LIST_LIMIT = 200

MANAGER_ACCOUNT_ID = "master-admin"

SUBSTITUTE_ACCEPTED_MARK = "[Colleague accepted]"
SUBSTITUTE_REJECTED_MARK = "[Colleague declined]"

CLOCK_IN_REASON_LABELS = {
    "EARLY": "Early clock-in",
    "LATE_OVER_15": "Late over 15 min",
    "NO_SCHEDULE": "Outside schedule",
}

REMEMBER_USER_COOKIE = "crew_board_user_id"
REMEMBER_MANAGER_COOKIE = "crew_board_manager_auth"
THEME_COOKIE = "crew_board_theme"

# Seeded on first start when the holidays table is empty.
DEFAULT_HOLIDAYS = (
    ("hol-1", "2024-05-05", "Children's Day", 4930),
    ("hol-2", "2024-05-15", "Buddha's Birthday", 4930),
)
