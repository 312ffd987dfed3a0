"""
Language-model status: lets the UI tell users whether AI grading, consultation
and insights are currently reachable.
"""

import logging

from fastapi import APIRouter, Depends

from agents.core.llm import LLM
from api.bootstrap import get_llm
from api.schemas.user_schemas import User
from api.utils.auth import get_current_user

llm_routes = APIRouter()
logger = logging.getLogger("uvicorn")


@llm_routes.get("/llm/status")
async def llm_status(
    current_user: User = Depends(get_current_user),
    llm: LLM = Depends(get_llm),
) -> dict:
    """Returns { "model": "llama3.2:1b", "available": true }."""
    available = await llm.check_available()
    if not available:
        logger.warning("Language model unavailable model=%s", getattr(llm, "model", None))
    return {"model": getattr(llm, "model", None), "available": available}
