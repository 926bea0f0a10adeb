"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_API_TIMEOUT = 15

VIN_LENGTH = 17
PIN_LENGTH = 4

DEFAULT_HOURLY_RATE = 120.0
DEFAULT_TAX_RATE = 7.7
ESTIMATE_VALID_DAYS = 30

SALARY_PERIOD_DAY = 25
DASHBOARD_REVENUE_MONTHS = 6
APPOINTMENT_DURATION_MINUTES = 60
