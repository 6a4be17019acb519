"""Global constants for the runbike application."""

# Firestore collections
PEOPLE_COLLECTION = "people"
TRAINING_ATTEMPTS_COLLECTION = "trainingAttempts"
TRAINING_TYPES_COLLECTION = "trainingTypes"
RACE_EVENTS_COLLECTION = "raceEvents"
RACE_ATTEMPTS_COLLECTION = "raceAttempts"
RACE_SERIES_COLLECTION = "raceSeries"
OTP_COLLECTION = "otps"

# Legacy flat race rows use this value for event placeholder rows
PREVIEW_MARKER = "PREVIEW"

# Stability scoring
STABILITY_MIN = 0.0
STABILITY_MAX = 100.0
SIMPLE_STD_DEV_WEIGHT = 40
WEIGHTED_CV_PENALTY = 700
WEIGHTED_RANGE_PENALTY = 50
WEIGHTED_CV_SHARE = 0.6
WEIGHTED_RANGE_SHARE = 0.4

# Age brackets tracked on the dashboard
AGE_BRACKETS = (3, 4, 5, 6)

# Date windows
QUICK_RANGES = ("1W", "1M", "3M")
DEFAULT_QUICK_RANGE = "1W"

# Dashboard widgets
UPCOMING_RACES_LIMIT = 2
CSV_SCORE_COLUMNS = 5

# Image framing defaults
FRAME_DEFAULT_SCALE = 1.0
FRAME_DEFAULT_OFFSET = 50.0
FRAME_MIN_SCALE = 1.0
FRAME_MAX_SCALE = 3.0

# Auth
ROLE_ADMIN = "admin"
ROLE_GUEST = "guest"
ROLE_MEMBER = "member"
OTP_DIGITS = 6
DEFAULT_SESSION_TTL = 8 * 60 * 60
DEFAULT_GUEST_OTP_TTL = 3 * 60 * 60
SESSION_COOKIE_KEY = "auth"
