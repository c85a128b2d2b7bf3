# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Volunteer service for applications and their review.

This module provides the VolunteerService class for:
- Validating and storing public applications (with a bot honeypot)
- Best-effort notification emails to staff and the applicant
- Paginated, searchable listing for staff
- Status review (pending, approved, rejected)
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.infrastructure.database.models import (
    ROLE_INTERESTS,
    UYGHUR_PROFICIENCIES,
    VOLUNTEER_STATUSES,
    WEEKLY_HOURS,
    Volunteer,
)
from academy.infrastructure.notifications import EmailDeliveryError, EmailSender
from academy.models.volunteer import VolunteerApplicationForm, VolunteerPage, VolunteerResponse
from academy.utils.identifiers import is_valid_id
from academy.utils.query import LIKE_ESCAPE, clamp_limit, clamp_page, contains_pattern

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEFAULT_VOLUNTEER_PAGE_LIMIT = 50


class VolunteerError(Exception):
    """Base exception for volunteer errors."""

    pass


class VolunteerValidationError(VolunteerError):
    """Raised when an application or status update has invalid fields.

    Attributes:
        field_errors: Message per offending field (camelCase names).
    """

    def __init__(self, message: str, field_errors: dict[str, str]) -> None:
        super().__init__(message)
        self.field_errors = field_errors


class InvalidVolunteerIdError(VolunteerError):
    """Raised when a volunteer id is malformed."""

    pass


class VolunteerNotFoundError(VolunteerError):
    """Raised when a volunteer application is not found."""

    pass


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_start_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = _text(value)
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


class VolunteerService:
    """Service for volunteer applications.

    Attributes:
        db: Async database session.
        email: Email sender for notifications.
    """

    def __init__(self, db: AsyncSession, email: EmailSender | None = None) -> None:
        self.db = db
        self.email = email

    async def apply(self, form: VolunteerApplicationForm) -> VolunteerResponse | None:
        """Validate and store an application.

        A filled honeypot field means the submission came from a bot; it is
        dropped without an error so the bot sees a normal success.

        Args:
            form: Submitted form.

        Returns:
            The stored application, or None for a dropped bot submission.

        Raises:
            VolunteerValidationError: If any field is invalid.
        """
        if _text(form.website):
            logger.info("Dropped volunteer submission with filled honeypot")
            return None

        name = _text(form.name)
        email = _text(form.email).lower()
        role_interest = _text(form.role_interest).lower()
        weekly_hours = _text(form.weekly_hours).lower()
        uyghur_proficiency = _text(form.uyghur_proficiency).lower()
        subjects = _text(form.subjects)
        availability = _text(form.availability)
        motivation = _text(form.motivation)

        errors: dict[str, str] = {}
        if not name:
            errors["name"] = "Name is required."
        if not email:
            errors["email"] = "Email is required."
        elif not EMAIL_RE.match(email):
            errors["email"] = "Invalid email format."
        if role_interest not in ROLE_INTERESTS:
            errors["roleInterest"] = "Invalid selection."
        if weekly_hours not in WEEKLY_HOURS:
            errors["weeklyHours"] = "Invalid selection."
        if uyghur_proficiency not in UYGHUR_PROFICIENCIES:
            errors["uyghurProficiency"] = "Invalid selection."

        start_date = None
        if not _text(form.start_date):
            errors["startDate"] = "Start date is required."
        else:
            start_date = _parse_start_date(form.start_date)
            if start_date is None:
                errors["startDate"] = "Invalid start date."

        if not subjects:
            errors["subjects"] = "Subjects are required."
        if not availability:
            errors["availability"] = "Availability is required."
        if not motivation:
            errors["motivation"] = "Motivation is required."

        if errors:
            raise VolunteerValidationError("Please correct the highlighted fields.", errors)

        volunteer = Volunteer(
            name=name,
            email=email,
            phone=_text(form.phone) or None,
            role_interest=role_interest,
            weekly_hours=weekly_hours,
            uyghur_proficiency=uyghur_proficiency,
            start_date=start_date,
            subjects=subjects,
            availability=availability,
            motivation=motivation,
            notes=_text(form.notes) or None,
        )
        self.db.add(volunteer)
        await self.db.commit()

        logger.info("Stored volunteer application %s", volunteer.id)
        return VolunteerResponse.model_validate(volunteer)

    async def notify_submission(self, volunteer: VolunteerResponse) -> None:
        """Email staff and the applicant about a new application.

        Never raises: an unconfigured or failing SMTP server only logs.
        """
        if self.email is None or not self.email.is_configured:
            logger.info("SMTP not configured; skipping volunteer emails for %s", volunteer.id)
            return

        settings = self.email.settings
        if settings.volunteer_notify_to:
            message = self.email.build_message(
                to=settings.volunteer_notify_to,
                subject=f"New volunteer application: {volunteer.name}",
                text=self._summary(volunteer),
                reply_to=settings.volunteer_reply_to or volunteer.email,
            )
            try:
                await self.email.send(message)
            except EmailDeliveryError as e:
                logger.error("Admin notification email failed: %s", e)

        confirmation = self.email.build_message(
            to=volunteer.email,
            subject="Thanks for volunteering with Dillar Academy",
            text=(
                f"Hi {volunteer.name},\n\n"
                "Thanks for your interest in volunteering with Dillar Academy. "
                "We received your submission and will follow up soon.\n\n"
                "Dillar Academy"
            ),
            reply_to=settings.volunteer_reply_to,
        )
        try:
            await self.email.send(confirmation)
        except EmailDeliveryError as e:
            logger.error("Volunteer confirmation email failed: %s", e)

    async def list_volunteers(
        self,
        page: object = None,
        limit: object = None,
        status: str | None = None,
        q: str | None = None,
    ) -> VolunteerPage:
        """List applications, newest first.

        An unknown status filter is ignored.

        Args:
            page: Requested page, clamped to >= 1.
            limit: Page size, default 50, clamped to [1, 200].
            status: Restrict to one review status.
            q: Literal, case-insensitive substring of name, email or subjects.

        Returns:
            One page of applications.
        """
        page_number = clamp_page(page)
        page_size = clamp_limit(limit, default=DEFAULT_VOLUNTEER_PAGE_LIMIT)

        conditions = []
        status = _text(status)
        if status in VOLUNTEER_STATUSES:
            conditions.append(Volunteer.status == status)
        q = _text(q)
        if q:
            pattern = contains_pattern(q)
            conditions.append(
                or_(
                    Volunteer.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Volunteer.email.ilike(pattern, escape=LIKE_ESCAPE),
                    Volunteer.subjects.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        total = await self.db.scalar(
            select(func.count()).select_from(select(Volunteer.id).where(*conditions).subquery())
        )
        result = await self.db.execute(
            select(Volunteer)
            .where(*conditions)
            .order_by(Volunteer.created_at.desc(), Volunteer.id)
            .offset((page_number - 1) * page_size)
            .limit(page_size)
        )
        items = [VolunteerResponse.model_validate(row) for row in result.scalars().all()]
        return VolunteerPage(items=items, total=int(total or 0), page=page_number, limit=page_size)

    async def update_status(self, volunteer_id: str, status: Any) -> str:
        """Set the review status of an application.

        Raises:
            InvalidVolunteerIdError: If the id is malformed.
            VolunteerValidationError: If the status is not a known status.
            VolunteerNotFoundError: If the application is not found.
        """
        if not is_valid_id(volunteer_id):
            raise InvalidVolunteerIdError("Invalid id.")

        next_status = _text(status)
        if next_status not in VOLUNTEER_STATUSES:
            raise VolunteerValidationError(
                "Invalid status.",
                {"status": "Status must be pending, approved, or rejected."},
            )

        volunteer = await self.db.get(Volunteer, volunteer_id)
        if volunteer is None:
            raise VolunteerNotFoundError("Not found.")

        volunteer.status = next_status
        await self.db.commit()
        logger.info("Volunteer %s marked %s", volunteer_id, next_status)
        return volunteer.status

    @staticmethod
    def _summary(volunteer: VolunteerResponse) -> str:
        return "\n".join(
            [
                "New volunteer submission",
                "",
                f"Name: {volunteer.name}",
                f"Email: {volunteer.email}",
                f"Phone: {volunteer.phone or '-'}",
                f"Role interest: {volunteer.role_interest}",
                f"Weekly hours: {volunteer.weekly_hours}",
                f"Uyghur proficiency: {volunteer.uyghur_proficiency}",
                f"Start date: {volunteer.start_date.isoformat()}",
                f"Subjects: {volunteer.subjects}",
                f"Availability: {volunteer.availability}",
                "",
                "Motivation:",
                volunteer.motivation,
                "",
                "Notes:",
                volunteer.notes or "-",
            ]
        )
