"""
Constants shared by the booking, tournament and team request flows.
"""

# Fixed one-hour booking windows offered on every turf, in display order
TIME_SLOTS = [
    "6:00 AM", "7:00 AM", "8:00 AM", "9:00 AM", "10:00 AM", "11:00 AM",
    "12:00 PM", "1:00 PM", "2:00 PM", "3:00 PM", "4:00 PM", "5:00 PM",
    "6:00 PM", "7:00 PM", "8:00 PM", "9:00 PM", "10:00 PM",
]

# Positions offered by the teammate request form, keyed by sport.
# Sports missing from this map accept any free-text position.
SPORT_POSITIONS = {
    "basketball": ["Point Guard", "Shooting Guard", "Small Forward", "Power Forward", "Center"],
    "football": ["Quarterback", "Running Back", "Wide Receiver", "Tight End", "Linebacker", "Cornerback"],
    "soccer": ["Goalkeeper", "Defender", "Midfielder", "Forward", "Striker"],
    "tennis": ["Singles Partner", "Doubles Partner"],
}

# Stock images used when a turf has no image of its own
SPORT_IMAGES = {
    "basketball": "https://images.unsplash.com/photo-1546519638-68e109498ffc?w=600&q=80",
    "football": "https://images.unsplash.com/photo-1431324155629-1a6deb1dec8d?w=600&q=80",
    "tennis": "https://images.unsplash.com/photo-1554068865-24cecd4e34b8?w=600&q=80",
    "soccer": "https://images.unsplash.com/photo-1529900748604-07564a03e7a6?w=600&q=80",
}
DEFAULT_SPORT_IMAGE = SPORT_IMAGES["football"]

# Marketing site "Featured Sports" grid
FEATURED_SPORTS = [
    {"name": "Basketball", "sport": "basketball", "events": 128},
    {"name": "Soccer", "sport": "soccer", "events": 256},
    {"name": "Tennis", "sport": "tennis", "events": 84},
    {"name": "Football", "sport": "football", "events": 64},
]

# Number of upcoming tournaments shown on the dashboard
DASHBOARD_TOURNAMENT_LIMIT = 6

# Minimum password length accepted at signup
MIN_PASSWORD_LENGTH = 6

# Fallback display names when a profile is missing
DEFAULT_POSTER_NAME = "Athlete"
DEFAULT_WELCOME_NAME = "Champion"
