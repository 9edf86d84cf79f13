"""
Configuration settings for storeadmin.

Centralized configuration for the API client, the review list and the CLI.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
OUTPUT_ROOT = PROJECT_ROOT / "output"

# API Configuration
API_BASE_URL = os.getenv("STOREADMIN_API_URL", "http://localhost:3000/api")
API_TOKEN = os.getenv("STOREADMIN_TOKEN", "")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("STOREADMIN_TIMEOUT", "30"))

# Endpoints
REVIEWS_ADMIN_PATH = "/resenia/admin"
CHECKOUT_PATH = "/checkout"
SALE_PATH = "/venta"

# Review list
PAGE_SIZE_OPTIONS = (15, 30, 50)
DEFAULT_PAGE_SIZE = 15
EARLIEST_YEAR_BUCKET = 2020  # "anteriores" matches this year and before
DELETE_NOTICE_SECONDS = 4  # Success notice lifetime after a delete

# Logging
LOG_LEVEL = os.getenv("STOREADMIN_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "storeadmin.log"
