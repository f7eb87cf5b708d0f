#!/usr/bin/env python
"""Pinterest OAuth login and pin listing."""

from __future__ import annotations

import logging
import secrets
from urllib.parse import urlencode

from flask import Blueprint, current_app, jsonify, redirect, request, session

from pinsound.errors import UpstreamError
from pinsound.observability.logging import vendor_fields

logger = logging.getLogger(__name__)

pinterest_bp = Blueprint("pinterest_bp", __name__)

# Per-browser CSRF state, kept in the signed session cookie
_STATE_KEY = "pinterest_oauth_state"


def get_pinterest_client():
    return current_app.extensions["pinterest_client"]


@pinterest_bp.route("/auth/pinterest", methods=["GET"])
def pinterest_login():
    client = get_pinterest_client()
    state = secrets.token_hex(16)
    try:
        auth_url = client.authorization_url(state)
    except UpstreamError as e:
        logger.error("Pinterest OAuth unavailable: %s", e, extra=vendor_fields(e))
        return jsonify({"message": "Pinterest login is not configured", "error": e.payload}), 500

    session[_STATE_KEY] = state
    logger.info("Redirecting to Pinterest OAuth URL")
    return redirect(auth_url)


@pinterest_bp.route("/auth/pinterest/callback", methods=["GET"])
def pinterest_callback():
    code = request.args.get("code")
    state = request.args.get("state")
    expected = session.pop(_STATE_KEY, None)

    if not state or not expected or not secrets.compare_digest(state.encode("utf-8"), expected.encode("utf-8")):
        logger.error("Invalid state parameter. Possible CSRF attack.")
        return jsonify({"message": "Invalid state parameter."}), 400

    if not code:
        logger.error("Authorization code not found.")
        return jsonify({"message": "Authorization code not found."}), 400

    client = get_pinterest_client()
    try:
        logger.info("Exchanging code for access token...")
        access_token = client.exchange_code(code)
        profile = client.user_account(access_token)
        logger.info("Logged-in Pinterest user: %s", profile.get("username"))
    except UpstreamError as e:
        logger.error("Error during token exchange or profile fetch: %s", e, extra=vendor_fields(e))
        return jsonify({"message": "OAuth process failed", "error": e.payload}), 500

    pins = []
    try:
        pins = client.fetch_all_pins(access_token)
    except UpstreamError as e:
        logger.warning("No pins found or error fetching pins: %s", e, extra=vendor_fields(e))

    first_pin_id = (pins[0].get("id") if pins else None) or ""
    frontend = current_app.config.get("FRONTEND_URL", "").rstrip("/")
    query = urlencode({"accessToken": access_token, "pinId": first_pin_id})
    return redirect(f"{frontend}/dashboard?{query}")


@pinterest_bp.route("/auth/pinterest/pins", methods=["GET"])
def pinterest_pins():
    access_token = request.args.get("accessToken")
    if not access_token:
        return jsonify({"message": "Access token missing"}), 400

    bookmark = request.args.get("bookmark") or None
    try:
        page = get_pinterest_client().list_pins(access_token, bookmark=bookmark)
    except UpstreamError as e:
        logger.error("Error fetching pins from Pinterest API: %s", e, extra=vendor_fields(e))
        return jsonify({"message": "Failed to fetch pins", "error": e.payload}), 500
    return jsonify(page)


__all__ = ["pinterest_bp"]
