"""SQLAlchemy ORM models"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Date, ForeignKey, Text, JSON
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class User(Base):
    """Registered account"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(Text, nullable=False)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    savings_plans = relationship("SavingsPlanRecord", back_populates="user", cascade="all, delete-orphan")


class UserProfile(Base):
    """Financial profile inputs (monthly figures)"""

    __tablename__ = "user_profiles"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    monthly_income = Column(Float, nullable=False, default=0)
    monthly_expenses = Column(Float, nullable=False, default=0)
    emergency_fund = Column(Float, nullable=False, default=0)
    debt_amount = Column(Float, nullable=False, default=0)
    job_stability = Column(Integer, nullable=False, default=5)
    risk_tolerance = Column(Text, nullable=False, default="medium")
    age = Column(Integer, nullable=False, default=30)
    dependents = Column(Integer, nullable=False, default=0)
    location = Column(Text, nullable=False, default="metro")
    industry = Column(Text, nullable=False, default="technology")
    experience_years = Column(Integer, nullable=False, default=5)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="profile")


class AssetAllocationRecord(Base):
    """Latest allocation snapshot per user"""

    __tablename__ = "asset_allocations"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    sip_percentage = Column(Float, nullable=False)
    stocks_percentage = Column(Float, nullable=False)
    bonds_percentage = Column(Float, nullable=False)
    lifestyle_percentage = Column(Float, nullable=False)
    emergency_fund_percentage = Column(Float, nullable=False)
    sip_amount = Column(Float, nullable=False)
    stocks_amount = Column(Float, nullable=False)
    bonds_amount = Column(Float, nullable=False)
    lifestyle_amount = Column(Float, nullable=False)
    emergency_amount = Column(Float, nullable=False)
    reasoning = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class EmergencyFundRecord(Base):
    """Latest emergency fund monitoring snapshot per user"""

    __tablename__ = "emergency_fund_monitoring"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    current_balance = Column(Float, nullable=False)
    target_months = Column(Integer, nullable=False, default=6)
    monthly_burn_rate = Column(Float, nullable=False)
    months_coverage = Column(Float, nullable=False)
    status = Column(Text, nullable=False)
    recommended_action = Column(Text, nullable=False)
    alerts = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class SavingsPlanRecord(Base):
    """Named savings goal"""

    __tablename__ = "savings_plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, nullable=False, default=0)
    monthly_contribution = Column(Float, nullable=False, default=0)
    lock_percentage = Column(Float, nullable=False, default=0.8)
    target_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="savings_plans")
