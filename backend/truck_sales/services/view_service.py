# Overview: Service-layer view recording for public truck detail fetches.

"""
View Recorder

Records at most one TruckView per (truck, visitor) inside a rolling
VIEW_DEDUP_WINDOW, where a visitor matches on session cookie OR hashed IP.

ADMIN EXCLUSION: a Referer containing "/admin/" skips recording. This is a
metrics-quality filter only and is a loose substring match; it
is not an authorization check.

CONCURRENCY: check-then-insert is not atomic. Two simultaneous first
requests from one visitor may both insert; that double count is tolerated.

FAILURE MODE: best effort. record_view_for_request() never raises; errors
are logged and the session is rolled back so the surrounding read still
succeeds.
"""
from __future__ import annotations

import hashlib
from datetime import datetime, timedelta

from flask import current_app

from ..extensions import db
from ..models import TruckView
from ..time_utils import utcnow

VIEW_DEDUP_WINDOW = timedelta(minutes=30)
ADMIN_PATH_SEGMENT = "/admin/"


def hash_ip(client_ip: str, salt: str) -> str:
    return hashlib.sha256(f"{client_ip}{salt}".encode("utf-8")).hexdigest()


def is_admin_referer(referer: str | None) -> bool:
    return bool(referer) and ADMIN_PATH_SEGMENT in referer


def client_ip_from_request(request) -> str | None:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()
    return request.remote_addr


def record_view_if_eligible(
    truck_id: int,
    *,
    referer: str | None,
    client_ip: str | None,
    session_id: str | None,
    salt: str,
    now: datetime | None = None,
) -> TruckView | None:
    """
    Insert a TruckView unless the request is admin traffic or the visitor
    already has a view of this truck inside the window.

    Returns the new row, or None when nothing was recorded.
    """
    if is_admin_referer(referer):
        return None

    now = now or utcnow()
    ip_hash = hash_ip(client_ip, salt) if client_ip else None
    session_id = session_id or None

    visitor_match = []
    if session_id:
        visitor_match.append(TruckView.session_id == session_id)
    if ip_hash:
        visitor_match.append(TruckView.ip_hash == ip_hash)

    if visitor_match:
        window_start = now - VIEW_DEDUP_WINDOW
        existing = db.session.query(TruckView.id).filter(
            TruckView.truck_id == truck_id,
            TruckView.timestamp >= window_start,
            db.or_(*visitor_match),
        ).first()
        if existing:
            return None

    view = TruckView(
        truck_id=truck_id,
        timestamp=now,
        ip_hash=ip_hash,
        session_id=session_id,
    )
    db.session.add(view)
    db.session.commit()
    return view


def record_view_for_request(truck_id: int, request) -> None:
    """Fire-and-forget wrapper used by the truck detail route."""
    try:
        record_view_if_eligible(
            truck_id,
            referer=request.headers.get("Referer"),
            client_ip=client_ip_from_request(request),
            session_id=request.cookies.get(current_app.config["VIEW_SESSION_COOKIE"]),
            salt=current_app.config["VIEW_IP_SALT"],
        )
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to record view for truck %s", truck_id)
