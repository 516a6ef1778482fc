# acelera-gt/dependencies.py
from database import SessionLocal
from store import DataStore

_store = None

# --- Store Dependency ---
def get_store() -> DataStore:
    global _store
    if _store is None:
        _store = DataStore.with_defaults()
    return _store

# --- Database Dependency ---
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
