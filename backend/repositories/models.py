"""
SQLAlchemy ORM models for persistence.
"""
from sqlalchemy import Column, Date, Float, Integer, String

from db import Base


class ProviderUsageORM(Base):
    __tablename__ = "provider_usage"

    day = Column(Date, primary_key=True)
    provider = Column(String, primary_key=True)
    call_count = Column(Integer, nullable=False, default=0)
    cost_estimate = Column(Float, nullable=False, default=0.0)
