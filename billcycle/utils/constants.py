DATE_FORMAT = "%Y-%m-%d"
BUDGET_ALERT_THRESHOLD = 0.80  # default 80%
UPCOMING_BILL_DAYS = 30
DEFAULT_REMINDER_DAYS = 7
REMINDER_EXPIRY_FALLBACK_DAYS = 30
CURRENCY_SYMBOL = "$"

FREQ_ONE_TIME = "one-time"
FREQ_DAILY = "daily"
FREQ_WEEKLY = "weekly"
FREQ_MONTHLY = "monthly"
FREQ_YEARLY = "yearly"
FREQUENCIES = [FREQ_ONE_TIME, FREQ_DAILY, FREQ_WEEKLY, FREQ_MONTHLY, FREQ_YEARLY]
FREQUENCY_ALIASES = {
    "one_time": FREQ_ONE_TIME,
    "onetime": FREQ_ONE_TIME,
    "once": FREQ_ONE_TIME,
}

PERIOD_DAILY = "daily"
PERIOD_MONTHLY = "monthly"
PERIOD_WEEKLY = "weekly"
PERIOD_YEARLY = "yearly"
PERIOD_CUSTOM = "custom"
PERIOD_KINDS = [PERIOD_DAILY, PERIOD_MONTHLY, PERIOD_WEEKLY, PERIOD_YEARLY, PERIOD_CUSTOM]

BILL_STATUSES = ["active", "paused", "cancelled"]

UNCATEGORIZED_LABEL = "Uncategorized"
UNCATEGORIZED_COLOR = "#CBD5E0"

SEVERITY_ORDER = {"error": 0, "warning": 1, "info": 2}
