"""
Fixed option sets and presets shared by the seating engine and adapters
"""

MEAL_OPTIONS = [
    "Standard",
    "Vegetarian",
    "Vegan",
    "Kosher",
    "Halal",
    "Gluten-Free",
    "Kids Meal",
]

DEFAULT_MEAL = "Standard"

DIETARY_OPTIONS = [
    "Nut Allergy",
    "Dairy-Free",
    "Shellfish Allergy",
    "Egg Allergy",
    "Soy Allergy",
    "Low Sodium",
    "Diabetic-Friendly",
]

TABLE_COLORS = [
    "#3B82F6",  # blue
    "#10B981",  # green
    "#F59E0B",  # amber
    "#EF4444",  # red
    "#8B5CF6",  # purple
    "#EC4899",  # pink
    "#06B6D4",  # cyan
    "#F97316",  # orange
]

PIXELS_PER_FOOT = 15

FLOOR_PRESETS = [
    {"label": "Small (40x30 ft)", "width": 40 * PIXELS_PER_FOOT, "height": 30 * PIXELS_PER_FOOT},
    {"label": "Medium (60x40 ft)", "width": 60 * PIXELS_PER_FOOT, "height": 40 * PIXELS_PER_FOOT},
    {"label": "Large (100x60 ft)", "width": 100 * PIXELS_PER_FOOT, "height": 60 * PIXELS_PER_FOOT},
    {"label": "Ballroom (150x80 ft)", "width": 150 * PIXELS_PER_FOOT, "height": 80 * PIXELS_PER_FOOT},
]

# type -> (label, default width, default height)
VENUE_OBJECT_TYPES = {
    "stage": ("Stage", 200, 80),
    "bar": ("Bar", 120, 40),
    "dancefloor": ("Dance Floor", 150, 150),
    "entrance": ("Entrance", 60, 30),
    "buffet": ("Buffet", 150, 50),
    "dj": ("DJ Booth", 80, 60),
    "photobooth": ("Photo Booth", 80, 80),
    "restrooms": ("Restrooms", 80, 60),
    "kitchen": ("Kitchen", 120, 80),
    "custom": ("Custom", 80, 80),
}

MIN_ZOOM = 0.5
MAX_ZOOM = 2.0

DEFAULT_SEAT_COUNT = 8
