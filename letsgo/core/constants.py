"""
Application constants that don't change between environments.
These are business logic constants, not configuration settings.
"""

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
RECENT_EVENTS_LIMIT = 5
SLIDER_EVENTS_LIMIT = 5
UPCOMING_EVENTS_LIMIT = 20

# Credentials
MIN_PASSWORD_LENGTH = 6
TOKEN_BYTES = 32

# Uploads
UPLOAD_URL_PREFIX = "/assets/uploads/images"
ALLOWED_IMAGE_TYPES = ["image/png", "image/jpg", "image/jpeg"]

# Free-text search targets on the Event model
SEARCH_FIELDS = [
    "title",
    "description",
    "address",
    "district",
    "city",
    "state",
    "local",
    "category",
]
