import os

from config import split_csv

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ward_board"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

DEFAULT_WARD = os.getenv("DEFAULT_WARD", "1st")

IDENTITY_HEADER_ID = os.getenv("IDENTITY_HEADER_ID", "X-Forwarded-User")
IDENTITY_HEADER_EMAIL = os.getenv("IDENTITY_HEADER_EMAIL", "X-Forwarded-Email")
IDENTITY_HEADER_NAME = os.getenv("IDENTITY_HEADER_NAME", "X-Forwarded-Preferred-Username")
IDENTITY_HEADER_PHOTO = os.getenv("IDENTITY_HEADER_PHOTO", "X-Forwarded-Photo")

CLOCK_VERIFIER_EMAILS = split_csv(os.getenv("CLOCK_VERIFIER_EMAILS", ""))

CONTACT_EMAIL = os.getenv("CONTACT_EMAIL", "")
FEED_KEEPALIVE_SECONDS = float(os.getenv("FEED_KEEPALIVE_SECONDS", "15"))
