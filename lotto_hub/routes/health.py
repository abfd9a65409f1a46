"""Health check routes."""

from __future__ import annotations

from flask import Blueprint, current_app

from lotto_hub.db import get_state
from lotto_hub.utils.responses import ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Health check endpoint."""

    state = get_state()
    return ok(
        {
            "status": "ok",
            "store": current_app.config.get("STORE_BACKEND"),
            "lotteries": len(state.lotteries),
            "sales": len(state.sales),
        }
    )
