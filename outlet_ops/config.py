"""
Centralized configuration — all env vars and import limits.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Flask ────────────────────────────────────────────────────────────────────
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')

# ── Redis (import previews) ──────────────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

# ── Database ─────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///outlets.db')

# ── OpenAI ────────────────────────────────────────────────────────────────────
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')

# ── Bulk import ──────────────────────────────────────────────────────────────
IMPORT_PREVIEW_TTL = int(os.getenv('IMPORT_PREVIEW_TTL', '3600'))   # seconds
IMPORT_MAX_ROWS = int(os.getenv('IMPORT_MAX_ROWS', '5000'))
IMPORT_MAX_SIZE_MB = float(os.getenv('IMPORT_MAX_SIZE_MB', '10'))

# Rows offered by GET /api/imports/template
IMPORT_TEMPLATE_ROWS = [
    {
        'Outlet Name': 'Dil Daily - Koramangala',
        'Brand': 'Dil Daily',
        'Cities': 'Bangalore',
        'Pipeline Stage': 'ONBOARDING REQUEST',
        'Outlet Status': 'onboarding in progress',
        'Live Date': '2023-12-26',
    },
    {
        'Outlet Name': 'Bihari Bowl - Indiranagar',
        'Brand': 'Bihari Bowl',
        'Cities': 'Bangalore',
        'Pipeline Stage': 'FASSI APPLY',
        'Outlet Status': 'onboarding in progress',
        'Live Date': '2023-11-05',
    },
]
