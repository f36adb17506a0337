from typing import Iterator
from redis import Redis
from sqlalchemy.orm import Session
from dailygreens.db.session import SessionLocal
from dailygreens.store.cache import get_client

def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try: yield db
    finally: db.close()

def get_cache() -> Redis:
    return get_client()
