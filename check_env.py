#!/usr/bin/env python3
"""Check the .env file and report which store and services the API will use."""

import sys
from pathlib import Path

ENV_TEMPLATE = """# Supabase (leave empty to run on the in-memory store)
MKT_SUPABASE_URL=https://your-project-id.supabase.co
MKT_SUPABASE_KEY=your-service-role-key-here

# API
MKT_API_PREFIX=/api
MKT_LOG_LEVEL=INFO
# JSON array or comma-separated: http://localhost:5173,http://127.0.0.1:5173
# MKT_FRONTEND_ALLOWED_ORIGINS=

# Data
MKT_DATA_ROOT=./data
# MKT_SEED_FILE=./data/seed.example.json

# Pricing and commissions
MKT_DEFAULT_ESTIMATED_TIME=30-45 minutes
MKT_FALLBACK_MAX_FEE=1000
MKT_DEFAULT_RESTAURANT_COMMISSION=0
MKT_DEFAULT_DRIVER_COMMISSION=70

# Geocoding
MKT_NOMINATIM_BASE_URL=https://nominatim.openstreetmap.org
MKT_NOMINATIM_USER_AGENT=delivery-marketplace/0.1
"""


def _mask(value: str) -> str:
    return value[:20] + "..." + value[-6:] if len(value) > 30 else value


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    if not env_file.exists():
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"Created template .env at {env_file}; edit it and run this script again.")
        return 1

    print(f"Found .env at {env_file}")
    sys.path.insert(0, str(project_root / "src"))
    try:
        from marketplace.config import settings
    except Exception as e:
        print(f"Error loading config: {e}")
        return 1

    if settings.supabase_url and settings.supabase_key:
        print(f"Supabase URL: {settings.supabase_url}")
        print(f"Supabase key: {_mask(settings.supabase_key)}")
        print("Store: supabase")
    else:
        print("Supabase not configured (MKT_SUPABASE_URL / MKT_SUPABASE_KEY).")
        print(f"Store: memory{' seeded from ' + str(settings.seed_file) if settings.seed_file else ''}")
    print(f"Data root: {settings.data_root}")
    print(f"Driver commission default: {settings.default_driver_commission}%")
    print(f"Restaurant commission default: {settings.default_restaurant_commission}%")
    print(f"Nominatim: {settings.nominatim_base_url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
