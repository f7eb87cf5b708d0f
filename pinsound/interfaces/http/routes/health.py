from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from pinsound.database.db_manager import db

health_bp = Blueprint("health_bp", __name__)


@health_bp.route("/healthz")
def healthz():
    status = 200
    checks = {}

    try:
        db.session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as exc:  # pragma: no cover - DB failure path
        status = 503
        checks["database"] = f"error: {exc}"

    settings = current_app.extensions.get("app_settings")
    vendors = settings.configured_vendors() if settings is not None else {}
    for name, configured in vendors.items():
        checks[name] = "configured" if configured else "missing_credentials"

    overall = "ok" if status == 200 else "degraded"
    return jsonify({"status": overall, "checks": checks}), status
