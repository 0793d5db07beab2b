"""Application constants."""

# Display formatting
SEPARATOR_LINE = "=" * 60

# Member roles
MEMBER_ROLE_TRAINEE = "trainee"
MEMBER_ROLE_MENTOR = "mentor"
MEMBER_ROLES = [MEMBER_ROLE_TRAINEE, MEMBER_ROLE_MENTOR]

# Search modes
SEARCH_MODE_SEMANTIC = "semantic"
SEARCH_MODE_TEXT = "text"

# Text search: terms must be longer than this
MIN_TERM_LENGTH = 2

# Standups
RECENT_STANDUPS_LIMIT = 10
BLOCKER_MARKERS = ("blocker", "challenge")

# Profile pictures accepted by the upload form (the bucket itself is broader)
PROFILE_PICTURE_UPLOAD_TYPES = ["image/jpeg", "image/jpg", "image/png"]
PROFILE_PICTURE_FOLDER = "profiles"

# HTTP function
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}
