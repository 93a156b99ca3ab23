"""
Pricing API - FastAPI app exposing quotes and the admin price matrix.

Display surfaces call it read-only; the conference configuration is sent
with every request, nothing is stored.
"""
import logging
from datetime import date, datetime, timezone
from typing import Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from conference_pricing import __version__
from conference_pricing.api.forms_api import router as forms_router
from conference_pricing.config.settings import get_settings
from conference_pricing.engine import PricingConfig, PricingEngine, QuoteRequest
from conference_pricing.engine.formatting import price_increase_message
from conference_pricing.engine.price_matrix import build_price_matrix, matrix_records
from conference_pricing.errors import EngineError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Conference Pricing API",
    description="Registration pricing and form validation for conference admin and registration pages",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include forms and ordering API
app.include_router(forms_router)


@app.exception_handler(EngineError)
async def engine_error_handler(request: Request, exc: EngineError):
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"kind": exc.kind.value, "message": exc.message},
    )


_engine: Optional[PricingEngine] = None


def get_engine() -> PricingEngine:
    global _engine
    if _engine is None:
        _engine = PricingEngine(get_settings())
    return _engine


def _load_config(pricing: dict) -> PricingConfig:
    try:
        return PricingConfig.from_dict(pricing, default_currency=get_settings().default_currency)
    except (TypeError, KeyError) as e:
        raise HTTPException(status_code=400, detail=f"Malformed pricing configuration: {e}")


class QuoteBody(BaseModel):
    pricing: dict
    now: Optional[datetime] = None
    category: str = "standard"
    accompanying_persons: int = Field(default=0, ge=0)
    add_on_ids: list[str] = Field(default_factory=list)
    conference_start: Optional[Union[datetime, date]] = None
    vat_fallback: Optional[float] = Field(default=None, ge=0, le=100)


class MatrixBody(BaseModel):
    pricing: dict
    vat_fallback: Optional[float] = Field(default=None, ge=0, le=100)


@app.get("/")
async def root():
    return {"status": "online", "message": "Conference Pricing API Active", "version": __version__}


@app.post("/pricing/quote")
async def quote(body: QuoteBody, engine: PricingEngine = Depends(get_engine)):
    config = _load_config(body.pricing)
    request = QuoteRequest(
        now=body.now or datetime.now(timezone.utc),
        category=body.category,
        accompanying_persons=body.accompanying_persons,
        add_on_ids=body.add_on_ids,
        conference_start=body.conference_start,
        vat_fallback=body.vat_fallback,
    )
    result = engine.quote(request, config)
    payload = jsonable_encoder(result)
    payload["message"] = price_increase_message(result.resolution)
    return payload


@app.post("/pricing/matrix")
async def price_matrix(body: MatrixBody, engine: PricingEngine = Depends(get_engine)):
    config = _load_config(body.pricing)
    vat_fallback = body.vat_fallback
    if vat_fallback is None:
        vat_fallback = engine.settings.default_vat_percentage
    df = build_price_matrix(config, vat_fallback)
    return {"currency": config.currency, "rows": matrix_records(df)}
