"""
Check that the PostgreSQL database for the VideoTube accounts API is reachable.
Run once before `alembic upgrade head`: python scripts/init_postgres.py

Requires: PostgreSQL installed and running. Create user and database:

  sudo -u postgres psql
  CREATE USER videotube WITH PASSWORD 'videotube';
  CREATE DATABASE videotube_db OWNER videotube;
  GRANT ALL PRIVILEGES ON DATABASE videotube_db TO videotube;
  \\q
"""

import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import create_engine, text
from app.config import settings


def main():
    url = settings.get_database_url()
    if not url.startswith("postgresql"):
        print("DATABASE_URL is not PostgreSQL. Skipping.")
        return
    try:
        engine = create_engine(url)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("PostgreSQL connection OK. Run `alembic upgrade head` next.")
    except Exception as e:
        print(f"Cannot connect to PostgreSQL: {e}")
        print("\nCreate database first:")
        print("  psql -U postgres -c \"CREATE USER videotube WITH PASSWORD 'videotube';\"")
        print("  psql -U postgres -c \"CREATE DATABASE videotube_db OWNER videotube;\"")
        print("  psql -U postgres -c \"GRANT ALL PRIVILEGES ON DATABASE videotube_db TO videotube;\"")
        sys.exit(1)


if __name__ == "__main__":
    main()
