# Overview: Flask API routes for pass issuance and lookup; parses input and returns JSON responses.

# backend/portpass/routes/passes.py
"""
Pass routes

- POST /api/passes: issue passes for one payer (multipart: data + slip)
- GET  /api/passes/recent: latest passes for the dashboard
- GET  /api/passes/transaction/<id>: a transaction and its passes (public,
  used by the print page)
"""

import json

from flask import Blueprint, request, jsonify, g, current_app

from ..errors import NotFound, ValidationError
from ..extensions import get_store
from ..services import issuance_service
from ..decorators import require_auth


passes_bp = Blueprint("passes", __name__, url_prefix="/api/passes")

MAX_RECENT_LIMIT = 50


@passes_bp.post("")
@require_auth
def create_passes():
    """
    Issue passes.

    multipart/form-data:
    - data: JSON string {"payer": {...}, "passes": [{...}, ...]}
    - slip: bank transfer slip (JPG, PNG or PDF, max 5MB)
    """
    raw = request.form.get("data")
    if not raw:
        raise ValidationError("Submission data is required")
    try:
        body = json.loads(raw)
    except ValueError:
        raise ValidationError("Submission data must be valid JSON") from None
    if not isinstance(body, dict):
        raise ValidationError("Submission data must be a JSON object")

    config = current_app.config
    result = issuance_service.issue_passes(
        get_store(),
        body.get("payer"),
        body.get("passes"),
        request.files.get("slip"),
        g.current_staff.id,
        slip_dir=config["SLIP_UPLOAD_DIR"],
        max_slip_bytes=config["MAX_SLIP_BYTES"],
        allowed_slip_types=config["ALLOWED_SLIP_TYPES"],
    )
    return jsonify(result.to_dict()), 201


@passes_bp.get("/recent")
@require_auth
def recent_passes():
    """Most recent passes, newest first. Query param: limit (default 5, max 50)."""
    limit = request.args.get("limit", type=int) or current_app.config["RECENT_PASSES_LIMIT"]
    limit = max(1, min(limit, MAX_RECENT_LIMIT))
    passes = get_store().recent_passes(limit)
    return jsonify([p.to_dict() for p in passes])


@passes_bp.get("/transaction/<transaction_id>")
def transaction_passes(transaction_id: str):
    store = get_store()
    transaction = store.get_transaction(transaction_id)
    if transaction is None:
        raise NotFound("Transaction not found")

    passes = store.list_passes_for_transaction(transaction_id)
    return jsonify({
        "transaction": transaction.to_dict(),
        "passes": [p.to_dict() for p in passes],
    })
