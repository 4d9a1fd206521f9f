from fastapi import APIRouter, Depends, HTTPException
from typing import Annotated
from pydantic import BaseModel
from datetime import datetime
from helpers.blocks import create_block, delete_block, list_blocks, serialize_block
from helpers.errors import BlockValidationError
from helpers.jwt_token import AuthenticatedUser, get_current_user


block_router = APIRouter()


class CreateBlockRequest(BaseModel):
    title: str
    start_time: datetime
    end_time: datetime


@block_router.post("/blocks")
async def create(req: CreateBlockRequest, user: Annotated[AuthenticatedUser, Depends(get_current_user)]):
    try:
        block = await create_block(
            owner_id=user.user_id,
            owner_email=user.email,
            title=req.title,
            start=req.start_time,
            end=req.end_time,
        )
        return serialize_block(block)
    except BlockValidationError as e:
        detail = {"error": e.message, "rule": e.rule, "message": e.message}
        if e.rule == "overlap":
            detail["error"] = "Time conflict detected"
            detail["conflicting_blocks"] = [serialize_block(b) for b in e.conflicting_blocks]
        raise HTTPException(status_code=e.status_code, detail=detail)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create block: {str(e)}")


@block_router.get("/blocks")
async def list_(user: Annotated[AuthenticatedUser, Depends(get_current_user)]):
    try:
        blocks = await list_blocks(user.user_id)
        return [serialize_block(b) for b in blocks]
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch blocks: {str(e)}")


@block_router.delete("/blocks/{block_id}")
async def delete(block_id: int, user: Annotated[AuthenticatedUser, Depends(get_current_user)]):
    try:
        await delete_block(user.user_id, block_id)
        return {"ok": True}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete block: {str(e)}")
