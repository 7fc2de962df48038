"""
Topic suggestions for the public upload page, proxied to the Gemini API.
"""
import logging

import requests
from flask import Blueprint, jsonify

from shared.constants import DEFAULT_NETWORK_TIMEOUT, GEMINI_ENDPOINT_TEMPLATE, TOPIC_PROMPT
from shared.errors import StationError, UpstreamError

logger = logging.getLogger(__name__)


def fetch_suggestion(http: requests.Session, api_key: str,
                     prompt: str = TOPIC_PROMPT,
                     timeout: int = DEFAULT_NETWORK_TIMEOUT) -> str:
    """Ask the model for one topic and return its text."""
    url = GEMINI_ENDPOINT_TEMPLATE.format(api_key=api_key)
    payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
    try:
        response = http.post(url, json=payload, timeout=timeout)
        response.raise_for_status()
        result = response.json()
        return result["candidates"][0]["content"]["parts"][0]["text"].strip()
    except requests.RequestException as e:
        logger.warning("Topic suggestion request failed: %s", e)
        raise UpstreamError("Failed to fetch suggestion.") from e
    except (ValueError, KeyError, IndexError, TypeError) as e:
        logger.warning("Unexpected topic suggestion response: %s", e)
        raise UpstreamError("Failed to fetch suggestion.") from e


def create_suggest_blueprint(ctx) -> Blueprint:
    bp = Blueprint('suggest', __name__)

    @bp.route('/suggest-topic', methods=['GET'])
    def suggest_topic():
        api_key = ctx.settings.gemini_api_key
        if not api_key:
            raise StationError("Server configuration error.")
        return jsonify({"suggestion": fetch_suggestion(ctx.http, api_key)})

    return bp
