"""
Prometheus metrics for authentication, booking allocation and room state.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from hotel_ops.metrics import booking_create_duration, bookings_created
    >>> with booking_create_duration.time():
    ...     booking = create_booking(engine, principal, request)
    ...     bookings_created.labels(source=booking["source"]).inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Authentication Metrics
# =============================================================================

auth_failures = Counter(
    "hotel_auth_failures_total",
    "Total number of rejected bearer credentials",
    ["reason"],
)
"""
Counter for failed authentications.

Labels:
    reason: missing_bearer, invalid, expired, revoked, disabled or provider_unreachable
"""

# =============================================================================
# Booking Metrics
# =============================================================================

bookings_created = Counter(
    "hotel_bookings_created_total",
    "Total number of bookings created",
    ["source"],
)

booking_conflicts = Counter(
    "hotel_booking_conflicts_total",
    "Total number of booking requests rejected because the room was taken",
)

booking_transitions = Counter(
    "hotel_booking_transitions_total",
    "Total number of booking lifecycle transitions",
    ["transition"],
)
"""
Counter for lifecycle transitions.

Labels:
    transition: check_in, check_out or cancel
"""

booking_create_duration = Histogram(
    "hotel_booking_create_duration_seconds",
    "Time spent validating and inserting a booking, including the room lock wait",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, float("inf")),
)

# =============================================================================
# Room Metrics
# =============================================================================

room_status_repairs = Counter(
    "hotel_room_status_repairs_total",
    "Room statuses rewritten by the reconciliation sweep",
    ["status"],
)
"""
Counter for reconciliation repairs.

Labels:
    status: Status the room was repaired to (Occupied or Cleaning)
"""
