"""Internal constants shared across the library."""

FIRESTORE_BASE_URL = "https://firestore.googleapis.com"
DEFAULT_DATABASE = "(default)"
USER_AGENT = "fleetdash/0"

# ------------------------------------------------------------------
# Collections and fields read by the orchestrator
# ------------------------------------------------------------------

VEHICLES_COLLECTION = "vehicles"
USERS_COLLECTION = "users"
BOOKINGS_COLLECTION = "bookings"
FEEDBACKS_COLLECTION = "feedbacks"

ROLE_FIELD = "role"
OWNER_ROLE = "owner"
CUSTOMER_ROLE = "customer"

BOOKING_ORDER_FIELD = "timestamp"
FEEDBACK_ORDER_FIELD = "createdAt"

# Compared with ``==``: the summary count is case sensitive.
AVAILABLE_STATUS = "Available"

# ------------------------------------------------------------------
# Notification feed
# ------------------------------------------------------------------

LOW_AVAILABILITY_ID = "low-availability"
BOOKING_NOTIFICATION_PREFIX = "booking-"
JUST_NOW_LABEL = "Just now"
TODAY_LABEL = "Today"
NOTIFICATION_PREVIEW_SIZE = 3

# ------------------------------------------------------------------
# Display
# ------------------------------------------------------------------

CURRENCY_SYMBOL = "₱"
MISSING_PRICE_LABEL = "N/A"
