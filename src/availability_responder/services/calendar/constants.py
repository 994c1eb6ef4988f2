from datetime import timedelta

DEFAULT_CALENDAR_ID = "primary"

# Events starting inside this window count as "now"
AVAILABILITY_WINDOW = timedelta(seconds=60)
AVAILABILITY_MAX_RESULTS = 10
MAX_RESULTS_LIMIT = 2500

STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"

TRANSPARENCY_OPAQUE = "opaque"
TRANSPARENCY_TRANSPARENT = "transparent"
