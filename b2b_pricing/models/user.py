from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime

from b2b_pricing.database.connection import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    role = Column(String, default="RETAILER", nullable=False)
    is_active = Column(Boolean, default=True)
    business_name = Column(String, nullable=True)

    # pipeline links, ids of the intermediary users
    assigned_agent_id = Column(String, nullable=True)
    gaddi_id = Column(String, nullable=True)
    assigned_distributor_id = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
