"""Routes for reading the structured log feed."""
from __future__ import annotations

from flask import jsonify, request

from ..logging_service import log_manager
from . import bp


@bp.route("/feed")
def feed():
    """Return filtered logs as JSON data."""
    limit = request.args.get("limit", type=int) or 50
    logs = log_manager.fetch_logs(
        level=request.args.get("level"),
        component=request.args.get("component"),
        result=request.args.get("result"),
        limit=min(limit, 500),
    )
    return jsonify(
        {
            "logs": logs,
            "levels": log_manager.available_levels,
            "components": log_manager.available_components,
        }
    )
