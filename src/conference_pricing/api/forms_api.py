"""
Forms API - FastAPI router for submission validation and list ordering.
"""
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from ..forms import build_validator
from ..ordering import move

router = APIRouter(tags=["forms"])


class ValidateBody(BaseModel):
    """Field definitions plus the submitted values, keyed by field name."""
    fields: list[dict[str, Any]]
    payload: dict[str, Any]


class DefaultsBody(BaseModel):
    fields: list[dict[str, Any]]


class MoveBody(BaseModel):
    items: list[Any]
    from_index: int
    to_index: int
    order_key: Optional[str] = "order"


@router.post("/forms/validate")
async def validate_submission(body: ValidateBody):
    try:
        validator = build_validator(body.fields)
    except KeyError as e:
        raise HTTPException(status_code=400, detail=f"Field definition missing {e}")
    result = validator.validate(body.payload)
    return jsonable_encoder(result)


@router.post("/forms/defaults")
async def form_defaults(body: DefaultsBody):
    try:
        validator = build_validator(body.fields)
    except KeyError as e:
        raise HTTPException(status_code=400, detail=f"Field definition missing {e}")
    return validator.defaults()


@router.post("/ordering/move")
async def move_item(body: MoveBody):
    items = move(body.items, body.from_index, body.to_index, key=body.order_key)
    return {"items": items}
