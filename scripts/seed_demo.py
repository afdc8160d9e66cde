#!/usr/bin/env python3
"""
Demo Data Seeder.

Creates one account per role and three sample claims for local development:
an APPROVED claim with a completed payment, a claim UNDER_REVIEW and a DRAFT.
Claims are driven through the regular services so every step passes the
lifecycle rules and leaves a status history.

Usage:
    python scripts/seed_demo.py [--password PASSWORD]

Existing demo accounts are reused; claims are added on every run.
"""

import argparse
import asyncio
import sys
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.config import settings
from medclaims.core.enums import ClaimStatus, PaymentStatus, UserRole
from medclaims.db.connection import close_db_connection, session_scope
from medclaims.models.user import User
from medclaims.schemas.claim import ClaimCreate, ClaimStatusUpdate
from medclaims.schemas.payment import PaymentStatusUpdate
from medclaims.schemas.user import UserCreate
from medclaims.services.claims_service import ClaimsService
from medclaims.services.payments_service import PaymentsService
from medclaims.services.users_service import UsersService
from medclaims.utils.logging import get_logger, setup_logging

setup_logging(level=settings.LOG_LEVEL)
logger = get_logger(__name__)

DEMO_ACCOUNTS = [
    ("patient@demo.com", "John Patient", UserRole.PATIENT,
     "+1-555-0101", "123 Main St, City, State 12345"),
    ("doctor@demo.com", "Dr. Sarah Wilson", UserRole.DOCTOR,
     "+1-555-0102", "456 Medical Center Dr, City, State 12345"),
    ("insurance@demo.com", "Insurance Agent", UserRole.INSURANCE,
     "+1-555-0103", "789 Insurance Plaza, City, State 12345"),
    ("bank@demo.com", "Bank Representative", UserRole.BANK,
     "+1-555-0104", "321 Banking Ave, City, State 12345"),
]


async def ensure_accounts(session: AsyncSession, password: str) -> dict[UserRole, User]:
    """Create the demo accounts that do not exist yet."""
    users_service = UsersService(session)
    accounts: dict[UserRole, User] = {}

    for email, name, role, phone, address in DEMO_ACCOUNTS:
        user = await users_service.get_by_email(email)
        if user is None:
            user = await users_service.create_account(
                UserCreate(
                    name=name,
                    email=email,
                    password=password,
                    role=role,
                    phone=phone,
                    address=address,
                )
            )
            logger.info(f"  + {email} ({role.value})")
        else:
            logger.info(f"  = {email} already exists")
        accounts[role] = user

    return accounts


async def seed_claims(session: AsyncSession, accounts: dict[UserRole, User]) -> None:
    patient = accounts[UserRole.PATIENT]
    doctor = accounts[UserRole.DOCTOR]
    insurer = accounts[UserRole.INSURANCE]
    bank = accounts[UserRole.BANK]

    claims = ClaimsService(session)
    payments = PaymentsService(session)

    # Approved, paid out and settled
    checkup = await claims.create_claim(
        patient,
        ClaimCreate(
            diagnosis="Annual Health Checkup",
            treatment_date=date(2024, 1, 15),
            claim_amount=Decimal("250.00"),
            description="Routine annual physical examination including blood work "
            "and basic screening tests.",
            doctor_id=doctor.id,
            submit=True,
        ),
    )
    await claims.transition(
        insurer, checkup.id,
        ClaimStatusUpdate(status=ClaimStatus.APPROVED, approved_amount=Decimal("225.00")),
    )
    payment = await payments.create_payment(
        bank, checkup.id, Decimal("225.00"), "Direct Deposit", "Payment processed successfully"
    )
    await payments.transition(
        bank, payment.id,
        PaymentStatusUpdate(status=PaymentStatus.COMPLETED, transaction_id="TXN-001-DEMO"),
    )
    await claims.settle_claim(bank, checkup.id)
    logger.info(f"  + {checkup.claim_number} {checkup.status.value}")

    # Under review
    flu = await claims.create_claim(
        patient,
        ClaimCreate(
            diagnosis="Flu Treatment",
            treatment_date=date(2024, 2, 10),
            claim_amount=Decimal("150.00"),
            description="Treatment for seasonal flu including consultation and "
            "prescribed medication.",
            doctor_id=doctor.id,
            submit=True,
        ),
    )
    await claims.transition(insurer, flu.id, ClaimStatusUpdate(status=ClaimStatus.UNDER_REVIEW))
    logger.info(f"  + {flu.claim_number} {flu.status.value}")

    # Draft
    dental = await claims.create_claim(
        patient,
        ClaimCreate(
            diagnosis="Dental Cleaning",
            treatment_date=date(2024, 3, 5),
            claim_amount=Decimal("120.00"),
            description="Routine dental cleaning and oral examination.",
        ),
    )
    logger.info(f"  + {dental.claim_number} {dental.status.value}")


async def main(password: str) -> int:
    try:
        async with session_scope() as session:
            logger.info("Seeding demo accounts...")
            accounts = await ensure_accounts(session, password)

            logger.info("Seeding demo claims...")
            await seed_claims(session, accounts)
    finally:
        await close_db_connection()

    logger.info("Database seeded successfully")
    for email, _, role, _, _ in DEMO_ACCOUNTS:
        logger.info(f"  {role.value:<9} {email} / {password}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo accounts and claims")
    parser.add_argument("--password", default="password123", help="Password for demo accounts")
    args = parser.parse_args()

    sys.exit(asyncio.run(main(args.password)))
