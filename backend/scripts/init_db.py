# backend/scripts/init_db.py
"""
Create every table from the SQLAlchemy models (no alembic history).

Usage:
    cd backend
    python scripts/init_db.py            # create missing tables
    python scripts/init_db.py --drop     # drop everything first
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from backoffice.core.config import engine  # noqa: E402
from backoffice.models import Base  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("--drop", action="store_true", help="drop all tables before creating them")
    args = ap.parse_args()

    if args.drop:
        Base.metadata.drop_all(bind=engine)
        print("Dropped all tables.")
    Base.metadata.create_all(bind=engine)
    print(f"Tables ready on {engine.url.render_as_string(hide_password=True)}:")
    for name in sorted(Base.metadata.tables):
        print("  -", name)


if __name__ == "__main__":
    main()
