import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, jsonify, request

from .errors import CatalogError
from .responder import get_responder
from .settings import settings

logger = logging.getLogger(__name__)

bp = Blueprint("webhook", __name__)

# Replies run here so a slow catalog fetch can be abandoned at the deadline.
_executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix="reply")

SERVICE_NAME = "Reza Gem Collection Webhook"
ASK_FOR_QUERY = "Please tell me what products you are looking for."
TIMEOUT_REPLY = "Sorry, the request is taking too long. Please try again."
ERROR_REPLY = "Sorry, I encountered an error while searching for products. Please try again."


# --- helpers ---

def fulfillment(text: str) -> Dict[str, Any]:
    """Dialogflow CX webhook response carrying one text message."""
    return {"fulfillment_response": {"messages": [{"text": {"text": [text]}}]}}


def _extract_text(payload: Dict[str, Any]) -> str:
    """User text from a Dialogflow CX / ES style payload."""
    query_result = payload.get("queryResult") or {}
    text = payload.get("text") or payload.get("queryText") or (
        query_result.get("queryText") if isinstance(query_result, dict) else None
    )
    return text.strip() if isinstance(text, str) else ""


@bp.after_app_request
def _cors(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


# --- routes ---

@bp.get("/")
@bp.get("/health")
def health():
    return jsonify({
        "status": "OK",
        "message": f"{SERVICE_NAME} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }), 200


@bp.post("/webhook")
def webhook():
    data = request.get_json(force=True, silent=True) or {}
    if not isinstance(data, dict):
        data = {}
    text = _extract_text(data)
    logger.info("Received text: %s", text)

    if not text:
        return jsonify(fulfillment(ASK_FOR_QUERY)), 400

    try:
        responder = get_responder()
        future = _executor.submit(responder.build_response_text, text)
        reply = future.result(timeout=settings.REQUEST_TIMEOUT_SECONDS)
    except FutureTimeout:
        logger.error("Request timeout after %ss", settings.REQUEST_TIMEOUT_SECONDS)
        return jsonify(fulfillment(TIMEOUT_REPLY)), 408
    except CatalogError as e:
        logger.error("Catalog unavailable: %s", e)
        return jsonify(fulfillment(ERROR_REPLY)), 500
    except Exception as e:
        logger.exception("Webhook handler failed: %s", e)
        return jsonify(fulfillment(ERROR_REPLY)), 500

    return jsonify(fulfillment(reply)), 200
