"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Hash lengths
SHA256_HEX_LENGTH = 64

# String field lengths
MAX_USERNAME_LENGTH = 30
MAX_EMAIL_LENGTH = 255
MAX_ENUM_LENGTH = 20

# Password requirements
BCRYPT_ROUNDS = 12

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32
DEFAULT_ACCESS_TOKEN_COOKIE = "accessToken"

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"
