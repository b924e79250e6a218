from datetime import datetime

from fastapi import FastAPI

from b2b_pricing.core.logging import configure_logging
from b2b_pricing.database.connection import Base, engine
from b2b_pricing.middleware.metrics import MetricsMiddleware, new_metrics
from b2b_pricing.models import order, pricing_rule, user  # noqa: F401  (table registration)
from b2b_pricing.routes import system
from b2b_pricing.routes.auth import router as auth_router
from b2b_pricing.routes.orders import router as orders_router
from b2b_pricing.routes.pricing_rules import router as pricing_rules_router

configure_logging()

Base.metadata.create_all(bind=engine)

app = FastAPI(title="B2B Wholesale Pricing & Settlement")

app.add_middleware(MetricsMiddleware)

app.include_router(auth_router)
app.include_router(pricing_rules_router)
app.include_router(orders_router)
app.include_router(system.router)


@app.on_event("startup")
async def startup_event():
    app.state.start_time = datetime.utcnow()
    app.state.metrics = new_metrics()
