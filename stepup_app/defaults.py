STORE_KEY = "stepup_data"

DEFAULT_TYPES = ["Strength", "Cardio", "Yoga", "HIIT", "Pilates", "Other"]

REST_TYPE = "Rest"

INTENSITY_LEVELS = ["Low", "Moderate", "High", "Extreme"]
DEFAULT_INTENSITY = "Moderate"

ALL_WORKOUTS = "All Workouts"

THIS_WEEK = "This Week"
THIS_MONTH = "This Month"
ALL_TIME = "All Time"
DATE_RANGES = [THIS_MONTH, THIS_WEEK, ALL_TIME]

SORT_NEWEST = "Date (Newest)"
SORT_OLDEST = "Date (Oldest)"
SORT_DURATION = "Duration"
SORT_CALORIES = "Calories"
SORT_OPTIONS = [SORT_NEWEST, SORT_OLDEST, SORT_DURATION, SORT_CALORIES]

# Calendar view shows at most this many dots under a day
MAX_CALENDAR_DOTS = 3

# Types broken out on the progress screen, in display order
BREAKDOWN_TYPES = ["Cardio", "Strength", "Yoga", "HIIT"]

DEFAULT_DOCUMENT = {
    "workouts": [],
    "customTypes": [],
}
