from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from marketplace_auth.depends import get_optional_user_id

router = APIRouter()


@router.get("/health")
async def health_check(user_id: Optional[UUID] = Depends(get_optional_user_id)):
    # A bad or missing token is not an error here
    return {"status": "ok", "authenticated": user_id is not None}
