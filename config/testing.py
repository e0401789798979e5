import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ward_board_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

DEFAULT_WARD = "1st"

IDENTITY_HEADER_ID = "X-Forwarded-User"
IDENTITY_HEADER_EMAIL = "X-Forwarded-Email"
IDENTITY_HEADER_NAME = "X-Forwarded-Preferred-Username"
IDENTITY_HEADER_PHOTO = "X-Forwarded-Photo"

CLOCK_VERIFIER_EMAILS = []

CONTACT_EMAIL = "board-admin@example.org"
FEED_KEEPALIVE_SECONDS = 0.05
