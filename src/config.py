"""Configuration module for the Attendance Tracker.

This module provides centralized configuration management, including directory
paths, database and API server settings, and attendance code constants.
All configuration values can be overridden via environment variables unless
noted otherwise.
"""

import os
import string
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / DATA_DIR_NAME)))

# --- Database Configuration ---

DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/attendance.db")

# Seed the default lecturers, courses and students into empty tables on startup
SEED_ON_STARTUP: bool = os.getenv("SEED_ON_STARTUP", "true").lower() == "true"

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "5000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Attendance Code Configuration ---

# Length and alphabet of issued attendance codes
CODE_LENGTH: int = 6
CODE_ALPHABET: str = string.ascii_uppercase + string.digits

# Validity window of an attendance code in milliseconds (fixed, 1 hour)
CODE_VALIDITY_MS: int = 3600000

# Reject redemption from students not enrolled in the course
REQUIRE_ENROLLMENT: bool = os.getenv("REQUIRE_ENROLLMENT", "true").lower() == "true"

# --- Directory Configuration ---

STUDENT_ID_PREFIX: str = "S-"
STUDENT_ID_WIDTH: int = 3

# The lecturer account with this username acts as administrator
ADMIN_USERNAME: str = "admin"

# --- Authentication Configuration ---

# 'plaintext' keeps stored passwords comparable with existing rows,
# 'bcrypt' stores and verifies bcrypt hashes instead
CREDENTIAL_SCHEME: str = os.getenv("CREDENTIAL_SCHEME", "plaintext").lower()
