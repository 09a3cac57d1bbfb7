"""
Press kit database module
SQLite (or any SQLAlchemy URL) via the SQLAlchemy ORM

Tables:
  city_data      - per-market statistics and national ranks
  articles       - past press coverage links
  media_outlets  - outlets to pitch, per market
"""

import os
from datetime import datetime
from typing import List, Optional

from dotenv import load_dotenv
from sqlalchemy import (
    create_engine, Column, String, Integer, Float, DateTime, Text, Index, func,
)
from sqlalchemy.orm import sessionmaker, declarative_base

from presskit.metrics import METRICS, METRICS_BY_SLUG, AverageStatistics

load_dotenv()

# ---------------------------------------------------------------------------
# Engine / session / base
# ---------------------------------------------------------------------------
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./presskit.db")

_engine_kwargs = {}
if DATABASE_URL.startswith("sqlite"):
    _engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, **_engine_kwargs)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# ===========================================================================
# Models
# ===========================================================================

class CityData(Base):
    """One market's statistics. Ranks are 1-based, 1 = best nationally."""
    __tablename__ = "city_data"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    city = Column(String, index=True, nullable=False)
    state = Column(String)
    gross_yield = Column(Float)
    gross_yield_rank = Column(Integer)
    total_revenue = Column(Float)
    total_revenue_rank = Column(Integer)
    total_listings = Column(Integer)
    total_listings_rank = Column(Integer)
    revenue_per_listing = Column(Float)
    revenue_per_listing_rank = Column(Integer)
    occupancy = Column(Float)
    occupancy_rank = Column(Integer)
    nightly_rate = Column(Float)
    nightly_rate_rank = Column(Integer)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class Article(Base):
    """Past press coverage"""
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    url = Column(String, nullable=False)
    category = Column(String, index=True, nullable=False)
    title = Column(String)
    og_image = Column(String)
    meta_description = Column(Text)
    created_at = Column(DateTime, default=datetime.now)


class MediaOutlet(Base):
    """Outlet contact for a market"""
    __tablename__ = "media_outlets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    url = Column(String, nullable=False)
    email = Column(String)
    type = Column(String, index=True, nullable=False)  # local_news / real_estate_publication / realtor_blog
    market = Column(String, index=True, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    __table_args__ = (
        Index("ix_outlets_market_type", "market", "type"),
    )


# ===========================================================================
# Init
# ===========================================================================

def init_db():
    """Create missing tables"""
    Base.metadata.create_all(bind=engine)
    print("[OK] Database initialized.")


def get_db():
    """Session generator for FastAPI Depends"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def display_name(city: CityData) -> str:
    return f"{city.city}, {city.state}" if city.state else city.city


# ===========================================================================
# CRUD: city_data
# ===========================================================================

_CITY_COLUMNS = {"city", "state"} | {m.field for m in METRICS} | {m.rank_field for m in METRICS}


def find_city_for_report(db, query: str) -> Optional[CityData]:
    """First city (insertion order) whose name contains query, case-insensitive."""
    needle = (query or "").lower()
    for city in db.query(CityData).order_by(CityData.id).all():
        if needle in city.city.lower():
            return city
    return None


def search_city(db, query: str) -> Optional[CityData]:
    """Exact city name first, then a partial match on the city or "City, ST"."""
    needle = (query or "").lower().strip()
    cities = db.query(CityData).order_by(CityData.id).all()
    for city in cities:
        if city.city.lower() == needle:
            return city
    for city in cities:
        if needle in city.city.lower():
            return city
        if city.state and needle in display_name(city).lower():
            return city
    return None


def get_city_names(db) -> List[str]:
    """One display name per city, ordered by city."""
    names = {}
    for city in db.query(CityData).order_by(CityData.city, CityData.id).all():
        names.setdefault(city.city, display_name(city))
    return list(names.values())


def get_all_cities(db) -> List[CityData]:
    return db.query(CityData).order_by(CityData.city).all()


def create_city(db, data: dict) -> CityData:
    safe = {k: v for k, v in data.items() if k in _CITY_COLUMNS}
    city = CityData(**safe)
    db.add(city)
    db.commit()
    db.refresh(city)
    return city


def compute_averages(db) -> AverageStatistics:
    return AverageStatistics.from_records(db.query(CityData).all())


def get_rankings(db, metric_slug: str, limit: int = 100) -> List[CityData]:
    """Cities with a rank for the metric, best first. KeyError for unknown slugs."""
    metric = METRICS_BY_SLUG[metric_slug]
    rank_col = getattr(CityData, metric.rank_field)
    return db.query(CityData).filter(rank_col.isnot(None))\
        .order_by(rank_col, CityData.id).limit(limit).all()


def replace_city_data(db, rows: List[dict]) -> int:
    """Delete every city, insert rows. One transaction."""
    try:
        deleted = db.query(CityData).delete()
        db.add_all(CityData(**{k: v for k, v in row.items() if k in _CITY_COLUMNS}) for row in rows)
        db.commit()
    except Exception:
        db.rollback()
        raise
    print(f"[IMPORT] replaced {deleted} city records with {len(rows)}")
    return len(rows)


# ===========================================================================
# CRUD: articles
# ===========================================================================

def get_articles(db, category: str = None) -> List[Article]:
    """Newest first; untitled articles go last."""
    q = db.query(Article)
    if category:
        q = q.filter(Article.category == category)
    rows = q.order_by(Article.created_at.desc(), Article.id.desc()).all()
    return sorted(rows, key=lambda a: not (a.title or "").strip())


def insert_article(db, data: dict) -> Article:
    article = Article(**{k: v for k, v in data.items() if hasattr(Article, k)})
    db.add(article)
    db.commit()
    db.refresh(article)
    return article


def delete_article(db, article_id: int) -> bool:
    article = db.query(Article).filter(Article.id == article_id).first()
    if article:
        db.delete(article)
        db.commit()
        return True
    return False


# ===========================================================================
# CRUD: media_outlets
# ===========================================================================

_OUTLET_FIELDS = ("name", "url", "email", "type", "market", "description")


def get_outlets(db, market: str = None, outlet_type: str = None) -> List[MediaOutlet]:
    q = db.query(MediaOutlet)
    if market:
        q = q.filter(MediaOutlet.market == market)
    if outlet_type:
        q = q.filter(MediaOutlet.type == outlet_type)
    return q.order_by(MediaOutlet.type, MediaOutlet.name).all()


def insert_outlet(db, data: dict) -> MediaOutlet:
    outlet = MediaOutlet(**{k: data.get(k) for k in _OUTLET_FIELDS})
    db.add(outlet)
    db.commit()
    db.refresh(outlet)
    return outlet


def update_outlet(db, outlet_id: int, data: dict) -> Optional[MediaOutlet]:
    """Partial update: only keys present in data are written."""
    outlet = db.query(MediaOutlet).filter(MediaOutlet.id == outlet_id).first()
    if not outlet:
        return None
    for key in _OUTLET_FIELDS:
        if key in data:
            value = data[key]
            if key in ("email", "description"):
                value = value or None
            setattr(outlet, key, value)
    db.commit()
    db.refresh(outlet)
    return outlet


def delete_outlet(db, outlet_id: int) -> bool:
    outlet = db.query(MediaOutlet).filter(MediaOutlet.id == outlet_id).first()
    if outlet:
        db.delete(outlet)
        db.commit()
        return True
    return False


def get_outlet_counts(db) -> dict:
    rows = db.query(MediaOutlet.market, func.count(MediaOutlet.id))\
        .group_by(MediaOutlet.market).all()
    return {market: count for market, count in rows}


def get_outlet_urls(db, market: str) -> List[str]:
    return [u[0] for u in db.query(MediaOutlet.url).filter(MediaOutlet.market == market).all()]


if __name__ == "__main__":
    init_db()
