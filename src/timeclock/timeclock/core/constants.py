"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

PIN_LENGTH = 4
PIN_ISSUE_ATTEMPTS = 50
DEFAULT_REPORT_DAYS = 7
DEFAULT_TIMEZONE = "Asia/Seoul"
HOURS_DECIMALS = 6
# employees.hourly_wage is DECIMAL(12, 2)
WAGE_DECIMALS = 2
WAGE_MAX_INTEGER_DIGITS = 10
