#!/usr/bin/env python3
# backend/init_db.py
"""
Database initialization script.

Creates the users, transactions, budgets and investments tables. Safe to
re-run: existing tables are left untouched.

This script can be run from any directory:
    python backend/init_db.py
    cd backend && python init_db.py
"""
import sys
from pathlib import Path

# Make the 'fintrack' package importable without installing it
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

from fintrack.database import engine
from fintrack.models import Base


def init_db() -> None:
    """Create all tables defined on the declarative Base."""
    print(f"Creating tables: {', '.join(sorted(Base.metadata.tables))}")
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")


if __name__ == "__main__":
    init_db()
