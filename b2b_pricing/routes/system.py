import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime

from b2b_pricing.database.connection import get_db
from b2b_pricing.dependencies.auth import require_admin
from b2b_pricing.schemas.system import HealthCheckResponse, SystemMetricsResponse
from b2b_pricing.models.order import Order
from b2b_pricing.models.pricing_rule import PricingRule

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


def _uptime(request: Request, now: datetime) -> float:
    start_time = getattr(request.app.state, "start_time", now)
    return (now - start_time).total_seconds()


@router.get("/health", response_model=HealthCheckResponse)
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Lightweight public health check.
    Returns ok + DB connectivity check (SELECT 1).
    """
    now = datetime.utcnow()

    db_ok = True
    extra = {}
    try:
        db.execute(select(1))
    except SQLAlchemyError as e:
        logger.error("Health check database probe failed: %s", e)
        db_ok = False
        extra["db_error"] = e.__class__.__name__

    return HealthCheckResponse(
        status="ok" if db_ok else "degraded",
        now=now,
        uptime_seconds=_uptime(request, now),
        db_ok=db_ok,
        extra=extra or None,
    )


@router.get("/metrics", response_model=SystemMetricsResponse, dependencies=[Depends(require_admin)])
def system_metrics(request: Request, db: Session = Depends(get_db)):
    """
    Admin-only system metrics in JSON form.
    Uses in-process counters stored on app.state.metrics and DB-derived metrics.
    """
    now = datetime.utcnow()

    metrics = getattr(request.app.state, "metrics", None) or {}
    requests_count = int(metrics.get("requests", 0))
    total_response_ms = float(metrics.get("total_response_ms", 0.0))
    avg_response_ms = (total_response_ms / requests_count) if requests_count > 0 else None

    pricing_rules = db.query(func.count(PricingRule.id)).scalar() or 0
    locked_rules = (
        db.query(func.count(PricingRule.id))
        .filter(PricingRule.is_locked.is_(True))
        .scalar()
    ) or 0

    start_today = datetime.combine(now.date(), datetime.min.time())
    total_orders_today = (
        db.query(func.count(Order.id))
        .filter(Order.created_at >= start_today)
        .scalar()
    ) or 0
    total_orders = db.query(func.count(Order.id)).scalar() or 0
    average_order_value = db.query(func.avg(Order.total_amount)).scalar()

    return SystemMetricsResponse(
        uptime_seconds=_uptime(request, now),
        now=now,
        requests_count=requests_count,
        avg_response_ms=avg_response_ms,
        pricing_failures=int(metrics.get("pricing_failures", 0)),
        pricing_rules=int(pricing_rules),
        locked_rules=int(locked_rules),
        total_orders_today=int(total_orders_today),
        total_orders=int(total_orders),
        average_order_value=float(average_order_value) if average_order_value is not None else None,
    )
