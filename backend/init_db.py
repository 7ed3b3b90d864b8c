#!/usr/bin/env python3
# backend/init_db.py
"""
Database initialization script for local development.

Creates the tables straight from the models, skipping Alembic. Use
`alembic upgrade head` for anything long-lived.

This script can be run from any directory:
    python backend/init_db.py
    cd backend && python init_db.py
"""
import sys
from pathlib import Path

# Add the backend directory to Python path so 'app' package is importable
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

from app.database import engine, check_database_health
from app.models import Base


def init_db() -> int:
    """Create all database tables defined in models."""
    health = check_database_health()
    if health["status"] != "healthy":
        print(f"Database unreachable: {health.get('error')}")
        return 1

    print(f"Creating tables on {health['database']}...")
    Base.metadata.create_all(bind=engine)
    print(f"Tables created: {', '.join(sorted(Base.metadata.tables))}")
    return 0


if __name__ == "__main__":
    sys.exit(init_db())
