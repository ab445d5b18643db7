"""
Database initialization script.
"""
from settleup.db.session import init_db

# Import all models so SQLAlchemy can register them
from settleup.models import LedgerDocument  # noqa: F401

if __name__ == "__main__":
    print("Initializing database...")
    init_db()
    print("Database initialized successfully!")
