"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── MySQL ─────────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "3306"))
DB_NAME: str = os.getenv("DB_NAME", "")
DB_USER: str = os.getenv("DB_USER", "root")
DB_PASS: str = os.getenv("DB_PASS", "")
DB_CHARSET: str = os.getenv("DB_CHARSET", "utf8mb4")
DB_INIT_COMMAND: str = os.getenv("DB_INIT_COMMAND", "SET NAMES 'UTF8'")
DB_CONNECT_TIMEOUT: int = int(os.getenv("DB_CONNECT_TIMEOUT", "10"))

# Default row shape for array returning queries: 'assoc' | 'num' | 'both'
DB_FETCH_MODE: str = os.getenv("DB_FETCH_MODE", "assoc")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Mail ──────────────────────────────────────────────────
MAIL_FROM: str = os.getenv("MAIL_FROM", "beaver@beaverindustries.co.ke")
MAIL_CC: str = os.getenv("MAIL_CC", "beaver@beaverindustries.co.ke")
SITE_ACCOUNT_URL: str = os.getenv("SITE_ACCOUNT_URL", "beaverindustries.co.ke/account")

# ── Navigation ────────────────────────────────────────────
NAV_AREA: str = os.getenv("NAV_AREA", "main")
