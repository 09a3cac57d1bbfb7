"""
FastAPI backend: short-term rental market press kit
"""

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Depends, HTTPException, Query, File, UploadFile
from fastapi.requests import Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime
import uvicorn

import database as db
from presskit import MarketRecord, generate_news_article, generate_press_release
from presskit import auth
from presskit.csv_import import CsvImportError, map_rows, parse_csv
from presskit.metrics import METRICS, METRICS_BY_SLUG
from presskit.og_scraper import extract_og_data
from presskit.outlets import OUTLET_TYPES, discover_outlets_for_market, search
from presskit.outlets.base import get_domain
from presskit.outlets.queries import build_search_links, well_known_suggestions

logger = logging.getLogger(__name__)


# ===========================================================================
# FastAPI app
# ===========================================================================

app = FastAPI(
    title="Press Kit",
    description="Short-term rental market rankings, press releases and media outreach",
    version="1.0.0",
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):
    """Every HTTP error as {"error": detail}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Unhandled exceptions become a 500 JSON."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


db.init_db()


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class CamelModel(BaseModel):
    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class CityResponse(CamelModel):
    id: int
    city: str
    state: Optional[str] = None
    gross_yield: Optional[float] = None
    gross_yield_rank: Optional[int] = None
    total_revenue: Optional[float] = None
    total_revenue_rank: Optional[int] = None
    total_listings: Optional[int] = None
    total_listings_rank: Optional[int] = None
    revenue_per_listing: Optional[float] = None
    revenue_per_listing_rank: Optional[int] = None
    occupancy: Optional[float] = None
    occupancy_rank: Optional[int] = None
    nightly_rate: Optional[float] = None
    nightly_rate_rank: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CityCreate(CamelModel):
    city: Optional[str] = None
    state: Optional[str] = None
    gross_yield: Optional[float] = None
    gross_yield_rank: Optional[int] = None
    total_revenue: Optional[float] = None
    total_revenue_rank: Optional[int] = None
    total_listings: Optional[int] = None
    total_listings_rank: Optional[int] = None
    revenue_per_listing: Optional[float] = None
    revenue_per_listing_rank: Optional[int] = None
    occupancy: Optional[float] = None
    occupancy_rank: Optional[int] = None
    nightly_rate: Optional[float] = None
    nightly_rate_rank: Optional[int] = None


class ArticleResponse(CamelModel):
    id: int
    url: str
    category: str
    title: Optional[str] = None
    og_image: Optional[str] = None
    meta_description: Optional[str] = None
    created_at: Optional[datetime] = None


class ArticleCreate(CamelModel):
    url: Optional[str] = None
    category: Optional[str] = None


class OutletResponse(CamelModel):
    id: int
    name: str
    url: str
    email: Optional[str] = None
    type: str
    market: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OutletCreate(CamelModel):
    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None
    type: Optional[str] = None
    market: Optional[str] = None
    description: Optional[str] = None


class OutletUpdate(OutletCreate):
    pass


class PressReleaseRequest(CamelModel):
    city: Optional[str] = None


class NewsArticleRequest(CamelModel):
    city: Optional[str] = None
    variant: int = 0


class LoginRequest(CamelModel):
    password: Optional[str] = None


class ImportRequest(CamelModel):
    data: List[dict] = []
    column_mapping: Dict[str, str] = {}


class DiscoverRequest(CamelModel):
    market: Optional[str] = None
    types: Optional[List[str]] = None


class CrawlRequest(CamelModel):
    market: Optional[str] = None
    auto_save: bool = False


def _check_outlet_type(outlet_type: str):
    if outlet_type not in OUTLET_TYPES:
        raise HTTPException(400, f"Invalid type. Must be one of: {', '.join(OUTLET_TYPES)}")


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

@app.post("/api/press-release")
async def create_press_release(body: PressReleaseRequest, db_session: Session = Depends(db.get_db)):
    if not body.city:
        raise HTTPException(400, "City is required")
    city = db.find_city_for_report(db_session, body.city)
    if not city:
        raise HTTPException(404, "City not found")
    try:
        text = generate_press_release(MarketRecord.from_row(city))
    except Exception:
        logger.exception("press release generation failed for %s", city.city)
        raise HTTPException(500, "Internal server error")
    return {"pressRelease": text}


@app.post("/api/news-article")
async def create_news_article(body: NewsArticleRequest, db_session: Session = Depends(db.get_db)):
    if not body.city:
        raise HTTPException(400, "City is required")
    city = db.find_city_for_report(db_session, body.city)
    if not city:
        raise HTTPException(404, "City not found")
    try:
        averages = db.compute_averages(db_session)
        total_markets = db_session.query(db.CityData).count()
        text = generate_news_article(
            MarketRecord.from_row(city), averages,
            total_markets=total_markets, variant=body.variant,
        )
    except Exception:
        logger.exception("news article generation failed for %s", city.city)
        raise HTTPException(500, "Internal server error")
    return {"article": text, "variant": body.variant}


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

@app.post("/api/auth/login")
async def login(body: LoginRequest, response: Response):
    if not auth.verify_password(body.password):
        raise HTTPException(401, "Invalid password")
    auth.set_auth_cookie(response, auth.generate_token())
    return {"success": True}


@app.get("/api/auth/check")
async def check_auth(request: Request):
    if not auth.is_authenticated(request):
        return JSONResponse(status_code=401, content={"authenticated": False})
    return {"authenticated": True}


@app.post("/api/auth/logout")
async def logout(response: Response):
    auth.clear_auth_cookie(response)
    return {"success": True}


# ---------------------------------------------------------------------------
# Cities
# ---------------------------------------------------------------------------

@app.get("/api/cities")
async def get_cities(city: Optional[str] = Query(None), db_session: Session = Depends(db.get_db)):
    """?city= returns one record, otherwise the list of display names."""
    if city:
        found = db.search_city(db_session, city)
        if not found:
            raise HTTPException(404, "City not found")
        return CityResponse.model_validate(found).model_dump(by_alias=True, mode="json")
    return db.get_city_names(db_session)


@app.post("/api/cities", response_model=CityResponse, dependencies=[Depends(auth.require_admin)])
async def create_city(body: CityCreate, db_session: Session = Depends(db.get_db)):
    if not body.city:
        raise HTTPException(400, "City is required")
    return db.create_city(db_session, body.model_dump(exclude_unset=True))


@app.get("/api/cities/all", response_model=List[CityResponse], dependencies=[Depends(auth.require_admin)])
async def get_all_cities(db_session: Session = Depends(db.get_db)):
    return db.get_all_cities(db_session)


@app.get("/api/cities/averages")
async def get_averages(db_session: Session = Depends(db.get_db)):
    return db.compute_averages(db_session).to_dict()


@app.post("/api/cities/upload", dependencies=[Depends(auth.require_admin)])
async def upload_cities_csv(file: Optional[UploadFile] = File(None)):
    if file is None:
        raise HTTPException(400, "No file provided")
    parsed = parse_csv(await file.read())
    logger.info("csv upload %s: %s rows", file.filename, len(parsed["data"]))
    return parsed


@app.post("/api/cities/import", dependencies=[Depends(auth.require_admin)])
async def import_cities(body: ImportRequest, db_session: Session = Depends(db.get_db)):
    try:
        rows = map_rows(body.data, body.column_mapping)
    except CsvImportError as e:
        raise HTTPException(400, str(e))
    count = db.replace_city_data(db_session, rows)
    return {"success": True, "count": count}


@app.get("/api/rankings")
async def get_rankings(metric: Optional[str] = Query(None), db_session: Session = Depends(db.get_db)):
    if not metric:
        raise HTTPException(400, "Metric parameter is required")
    if metric not in METRICS_BY_SLUG:
        raise HTTPException(400, "Invalid metric")
    selected = METRICS_BY_SLUG[metric]
    rows = []
    for city in db.get_rankings(db_session, metric):
        row = {
            "id": city.id, "city": city.city, "state": city.state,
            "rank": getattr(city, selected.rank_field),
            "value": getattr(city, selected.field),
        }
        for m in METRICS:
            row[m.key] = getattr(city, m.field)
            row[m.rank_key] = getattr(city, m.rank_field)
        rows.append(row)
    return rows


# ---------------------------------------------------------------------------
# Past press
# ---------------------------------------------------------------------------

@app.get("/api/articles", response_model=List[ArticleResponse])
async def get_articles(category: Optional[str] = Query(None), db_session: Session = Depends(db.get_db)):
    return db.get_articles(db_session, category)


@app.post("/api/articles", response_model=ArticleResponse, dependencies=[Depends(auth.require_admin)])
def create_article(body: ArticleCreate, db_session: Session = Depends(db.get_db)):
    if not body.url or not body.category:
        raise HTTPException(400, "URL and category are required")
    og = extract_og_data(body.url)
    return db.insert_article(db_session, {
        "url": body.url,
        "category": body.category,
        "title": og.title,
        "og_image": og.og_image,
        "meta_description": og.description,
    })


@app.delete("/api/articles/{article_id}", dependencies=[Depends(auth.require_admin)])
async def delete_article(article_id: int, db_session: Session = Depends(db.get_db)):
    if not db.delete_article(db_session, article_id):
        raise HTTPException(404, "Article not found")
    return {"success": True}


# ---------------------------------------------------------------------------
# Media outlets
# ---------------------------------------------------------------------------

@app.get("/api/media-outlets", response_model=List[OutletResponse])
async def get_media_outlets(
    market: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    db_session: Session = Depends(db.get_db),
):
    return db.get_outlets(db_session, market, type)


@app.post("/api/media-outlets", response_model=OutletResponse, dependencies=[Depends(auth.require_admin)])
async def create_media_outlet(body: OutletCreate, db_session: Session = Depends(db.get_db)):
    if not body.name or not body.url or not body.type or not body.market:
        raise HTTPException(400, "Name, URL, type, and market are required")
    _check_outlet_type(body.type)
    return db.insert_outlet(db_session, {
        "name": body.name, "url": body.url, "email": body.email or None,
        "type": body.type, "market": body.market, "description": body.description or None,
    })


@app.put("/api/media-outlets/{outlet_id}", response_model=OutletResponse,
         dependencies=[Depends(auth.require_admin)])
async def update_media_outlet(outlet_id: int, body: OutletUpdate, db_session: Session = Depends(db.get_db)):
    data = body.model_dump(exclude_unset=True)
    if "type" in data:
        _check_outlet_type(data["type"])
    outlet = db.update_outlet(db_session, outlet_id, data)
    if not outlet:
        raise HTTPException(404, "Outlet not found")
    return outlet


@app.delete("/api/media-outlets/{outlet_id}", dependencies=[Depends(auth.require_admin)])
async def delete_media_outlet(outlet_id: int, db_session: Session = Depends(db.get_db)):
    if not db.delete_outlet(db_session, outlet_id):
        raise HTTPException(404, "Outlet not found")
    return {"success": True}


@app.post("/api/media-outlets/discover", dependencies=[Depends(auth.require_admin)])
async def discover_media_outlets(body: DiscoverRequest):
    if not body.market:
        raise HTTPException(400, "Market is required")
    links = build_search_links(body.market, body.types)
    return {
        "market": body.market,
        "searchLinks": links,
        "suggestions": well_known_suggestions(body.market),
        "message": (
            f'Generated {len(links)} search queries for "{body.market}". '
            "Use the Google links to discover outlets, then add them via the admin panel."
        ),
    }


@app.get("/api/media-outlets/crawl", dependencies=[Depends(auth.require_admin)])
async def get_crawl_markets(db_session: Session = Depends(db.get_db)):
    markets = db.get_city_names(db_session)
    return {
        "markets": markets,
        "existingCounts": db.get_outlet_counts(db_session),
        "total": len(markets),
        "hasApiKey": search.has_api_key(),
    }


@app.post("/api/media-outlets/crawl", dependencies=[Depends(auth.require_admin)])
def crawl_media_outlets(body: CrawlRequest, db_session: Session = Depends(db.get_db)):
    if not body.market:
        raise HTTPException(400, "Market is required")
    market = body.market
    result = discover_outlets_for_market(market)
    payload = {
        "market": market,
        "discovered": len(result.outlets),
        "searchesUsed": result.searches_used,
        "errors": result.errors,
        "outlets": [o.to_dict() for o in result.outlets],
    }
    if not body.auto_save or not result.outlets:
        return payload

    existing = {get_domain(u) for u in db.get_outlet_urls(db_session, market)}
    saved = 0
    for outlet in result.outlets:
        domain = get_domain(outlet.url)
        if domain in existing:
            continue
        try:
            db.insert_outlet(db_session, {
                "name": outlet.name, "url": outlet.url, "email": outlet.email,
                "type": outlet.type, "market": market, "description": outlet.description,
            })
        except Exception:
            db_session.rollback()
            logger.exception("[crawl] could not save outlet %s", outlet.name)
            continue
        existing.add(domain)
        saved += 1

    payload["saved"] = saved
    payload["skippedDuplicates"] = len(result.outlets) - saved
    return payload


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    print("[START] Press Kit v1.0")
    print("[INFO] API: http://localhost:8000")
    print("[INFO] Docs: http://localhost:8000/docs")
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=False, log_level="info")
