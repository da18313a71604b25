"""Data access layer for users, profiles and stored snapshots"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from capstack_gateway.domain.exceptions import ProfileUnavailableError, UserAlreadyExistsError
from capstack_gateway.domain.models import (
    AllocatedAmounts,
    AssetAllocation,
    EmergencyFundStatus,
    FinancialProfile,
    RiskTolerance,
    SavingsPlan,
)
from capstack_gateway.infrastructure.database.models import (
    AssetAllocationRecord,
    EmergencyFundRecord,
    SavingsPlanRecord,
    User,
    UserProfile,
)


class UserRepository:
    """Repository for user accounts"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def create_user(self, email: str, name: str, password_hash: str) -> User:
        """
        Raises:
            UserAlreadyExistsError: when the email is already registered
        """
        if self.get_by_email(email) is not None:
            raise UserAlreadyExistsError(f"User with email {email} already exists")

        user = User(email=email, name=name, password_hash=password_hash)
        self.db.add(user)
        self.db.flush()  # Get ID without committing
        return user


class ProfileRepository:
    """SQL-backed profile store used by the calculators"""

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: int) -> Optional[FinancialProfile]:
        """
        Raises:
            ProfileUnavailableError: when the database cannot be queried or the row is unreadable
        """
        try:
            row = self.db.get(UserProfile, user_id)
        except SQLAlchemyError as e:
            raise ProfileUnavailableError(f"Failed to load profile for user {user_id}: {e}") from e

        if row is None:
            return None

        try:
            risk_tolerance = RiskTolerance(row.risk_tolerance)
        except ValueError as e:
            raise ProfileUnavailableError(f"Stored profile for user {user_id} is unreadable: {e}") from e

        return FinancialProfile(
            monthly_income=row.monthly_income,
            monthly_expenses=row.monthly_expenses,
            emergency_fund=row.emergency_fund,
            debt_amount=row.debt_amount,
            job_stability_score=row.job_stability,
            risk_tolerance=risk_tolerance,
            age=row.age,
            dependents=row.dependents,
            location=row.location,
            industry=row.industry,
            experience_years=row.experience_years,
        )

    def upsert_profile(self, user_id: int, profile: FinancialProfile) -> UserProfile:
        row = self.db.get(UserProfile, user_id)
        if row is None:
            row = UserProfile(user_id=user_id)
            self.db.add(row)

        row.monthly_income = profile.monthly_income
        row.monthly_expenses = profile.monthly_expenses
        row.emergency_fund = profile.emergency_fund
        row.debt_amount = profile.debt_amount
        row.job_stability = profile.job_stability_score
        row.risk_tolerance = getattr(profile.risk_tolerance, "value", profile.risk_tolerance)
        row.age = profile.age
        row.dependents = profile.dependents
        row.location = profile.location
        row.industry = profile.industry
        row.experience_years = profile.experience_years
        row.updated_at = datetime.now(timezone.utc)

        self.db.flush()
        return row


class AllocationRepository:
    """Repository for allocation snapshots (one row per user, latest wins)"""

    def __init__(self, db: Session):
        self.db = db

    def get_allocation(self, user_id: int) -> Optional[AssetAllocation]:
        row = self.db.get(AssetAllocationRecord, user_id)
        if row is None:
            return None

        return AssetAllocation(
            sip_percentage=row.sip_percentage,
            stocks_percentage=row.stocks_percentage,
            bonds_percentage=row.bonds_percentage,
            lifestyle_percentage=row.lifestyle_percentage,
            emergency_fund_percentage=row.emergency_fund_percentage,
            allocated_amounts=AllocatedAmounts(
                sip=row.sip_amount,
                stocks=row.stocks_amount,
                bonds=row.bonds_amount,
                lifestyle=row.lifestyle_amount,
                emergency=row.emergency_amount,
            ),
            reasoning=list(row.reasoning or []),
        )

    def save_allocation(self, user_id: int, allocation: AssetAllocation) -> AssetAllocationRecord:
        """Insert or overwrite the user's snapshot; created_at survives overwrites"""
        row = self.db.get(AssetAllocationRecord, user_id)
        if row is None:
            row = AssetAllocationRecord(user_id=user_id)
            self.db.add(row)

        amounts = allocation.allocated_amounts
        row.sip_percentage = allocation.sip_percentage
        row.stocks_percentage = allocation.stocks_percentage
        row.bonds_percentage = allocation.bonds_percentage
        row.lifestyle_percentage = allocation.lifestyle_percentage
        row.emergency_fund_percentage = allocation.emergency_fund_percentage
        row.sip_amount = amounts.sip
        row.stocks_amount = amounts.stocks
        row.bonds_amount = amounts.bonds
        row.lifestyle_amount = amounts.lifestyle
        row.emergency_amount = amounts.emergency
        row.reasoning = list(allocation.reasoning)
        row.updated_at = datetime.now(timezone.utc)

        self.db.flush()
        return row


class EmergencyFundRepository:
    """Repository for emergency fund snapshots (one row per user, latest wins)"""

    def __init__(self, db: Session):
        self.db = db

    def get_status(self, user_id: int) -> Optional[EmergencyFundStatus]:
        row = self.db.get(EmergencyFundRecord, user_id)
        if row is None:
            return None

        return EmergencyFundStatus(
            current_balance=row.current_balance,
            target_months=row.target_months,
            monthly_burn_rate=row.monthly_burn_rate,
            months_coverage=row.months_coverage,
            status=row.status,
            recommended_action=row.recommended_action,
            alerts=list(row.alerts or []),
        )

    def save_status(self, user_id: int, status: EmergencyFundStatus) -> EmergencyFundRecord:
        row = self.db.get(EmergencyFundRecord, user_id)
        if row is None:
            row = EmergencyFundRecord(user_id=user_id)
            self.db.add(row)

        row.current_balance = status.current_balance
        row.target_months = status.target_months
        row.monthly_burn_rate = status.monthly_burn_rate
        row.months_coverage = status.months_coverage
        row.status = status.status
        row.recommended_action = status.recommended_action
        row.alerts = list(status.alerts)
        row.updated_at = datetime.now(timezone.utc)

        self.db.flush()
        return row


class SavingsPlanRepository:
    """Repository for savings plans"""

    def __init__(self, db: Session):
        self.db = db

    def create_plan(self, user_id: int, plan: SavingsPlan) -> SavingsPlan:
        row = SavingsPlanRecord(
            user_id=user_id,
            name=plan.name,
            target_amount=plan.target_amount,
            current_amount=plan.current_amount,
            monthly_contribution=plan.monthly_contribution,
            lock_percentage=plan.lock_percentage,
            target_date=plan.target_date,
        )
        self.db.add(row)
        self.db.flush()
        return self._to_plan(row)

    def get_plans_by_user(self, user_id: int) -> List[SavingsPlan]:
        """Fetch plans for a user, newest first"""
        rows = (
            self.db.query(SavingsPlanRecord)
            .filter(SavingsPlanRecord.user_id == user_id)
            .order_by(SavingsPlanRecord.created_at.desc(), SavingsPlanRecord.id.desc())
            .all()
        )
        return [self._to_plan(row) for row in rows]

    @staticmethod
    def _to_plan(row: SavingsPlanRecord) -> SavingsPlan:
        return SavingsPlan(
            id=row.id,
            name=row.name,
            target_amount=row.target_amount,
            current_amount=row.current_amount,
            monthly_contribution=row.monthly_contribution,
            lock_percentage=row.lock_percentage,
            target_date=row.target_date,
        )
