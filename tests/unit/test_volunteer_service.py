# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for VolunteerService."""

from datetime import date
from unittest.mock import AsyncMock
from uuid import uuid4

import aiosmtplib
import pytest
from sqlalchemy import func, select

from academy.core.config import SMTPSettings
from academy.domains.volunteer import (
    InvalidVolunteerIdError,
    VolunteerNotFoundError,
    VolunteerService,
    VolunteerValidationError,
)
from academy.infrastructure.database.models import Volunteer
from academy.infrastructure.notifications import EmailSender
from academy.models.volunteer import VolunteerApplicationForm


def _form(**overrides) -> VolunteerApplicationForm:
    values = {
        "name": "  Dilnur Ablet ",
        "email": "Dilnur@Example.com",
        "roleInterest": "Teach",
        "weeklyHours": "2",
        "uyghurProficiency": "fluent",
        "startDate": "2026-11-01",
        "subjects": "English conversation",
        "availability": "Weekends",
        "motivation": "Give back",
    }
    values.update(overrides)
    return VolunteerApplicationForm.model_validate(values)


@pytest.fixture
def service(db) -> VolunteerService:
    return VolunteerService(db=db)


@pytest.fixture
def smtp_send(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    send = AsyncMock()
    monkeypatch.setattr(aiosmtplib, "send", send)
    return send


class TestApply:
    """Tests for storing applications."""

    async def test_valid_application_is_normalized(self, service):
        stored = await service.apply(_form())

        assert stored.name == "Dilnur Ablet"
        assert stored.email == "dilnur@example.com"
        assert stored.role_interest == "teach"
        assert stored.start_date == date(2026, 11, 1)
        assert stored.status == "pending"
        assert stored.phone is None

    async def test_datetime_start_date(self, service):
        stored = await service.apply(_form(startDate="2026-11-01T10:00:00Z"))

        assert stored.start_date == date(2026, 11, 1)

    async def test_honeypot_drops_silently(self, db, service):
        assert await service.apply(_form(website="http://spam.example.com")) is None

        assert await db.scalar(select(func.count()).select_from(Volunteer)) == 0

    async def test_reports_every_invalid_field(self, db, service):
        form = VolunteerApplicationForm.model_validate(
            {"email": "not-an-email", "roleInterest": "cook", "startDate": "soon"}
        )

        with pytest.raises(VolunteerValidationError) as exc_info:
            await service.apply(form)

        assert exc_info.value.field_errors == {
            "name": "Name is required.",
            "email": "Invalid email format.",
            "roleInterest": "Invalid selection.",
            "weeklyHours": "Invalid selection.",
            "uyghurProficiency": "Invalid selection.",
            "startDate": "Invalid start date.",
            "subjects": "Subjects are required.",
            "availability": "Availability is required.",
            "motivation": "Motivation is required.",
        }
        assert await db.scalar(select(func.count()).select_from(Volunteer)) == 0

    async def test_missing_start_date(self, service):
        with pytest.raises(VolunteerValidationError) as exc_info:
            await service.apply(_form(startDate=""))

        assert exc_info.value.field_errors == {"startDate": "Start date is required."}


class TestNotify:
    """Tests for notification emails."""

    def _sender(self, **overrides) -> EmailSender:
        values = {
            "host": "smtp.example.com",
            "username": "mailer",
            "password": "secret",
            "from_email": "noreply@dillaracademy.org",
            "volunteer_notify_to": "team@dillaracademy.org",
        }
        values.update(overrides)
        return EmailSender(SMTPSettings(**values))

    async def test_staff_and_applicant_are_emailed(self, db, smtp_send):
        service = VolunteerService(db, self._sender())
        stored = await service.apply(_form())

        await service.notify_submission(stored)

        recipients = [call.args[0]["To"] for call in smtp_send.await_args_list]
        assert recipients == ["team@dillaracademy.org", "dilnur@example.com"]
        assert smtp_send.await_args_list[0].args[0]["Reply-To"] == "dilnur@example.com"

    async def test_no_staff_inbox_only_confirms(self, db, smtp_send):
        service = VolunteerService(db, self._sender(volunteer_notify_to=None))
        stored = await service.apply(_form())

        await service.notify_submission(stored)

        assert [call.args[0]["To"] for call in smtp_send.await_args_list] == ["dilnur@example.com"]

    async def test_unconfigured_smtp_is_skipped(self, db, smtp_send):
        service = VolunteerService(db, self._sender(host=None))
        stored = await service.apply(_form())

        await service.notify_submission(stored)

        smtp_send.assert_not_awaited()

    async def test_delivery_failure_is_not_raised(self, db, smtp_send):
        smtp_send.side_effect = aiosmtplib.SMTPException("mailbox full")
        service = VolunteerService(db, self._sender())
        stored = await service.apply(_form())

        await service.notify_submission(stored)

        assert smtp_send.await_count == 2


class TestListAndReview:
    """Tests for the staff listing and status updates."""

    async def test_newest_first_with_paging(self, service):
        for n in range(3):
            await service.apply(_form(name=f"Volunteer {n}", email=f"v{n}@example.com"))

        page = await service.list_volunteers(page=1, limit=2)

        assert page.total == 3
        assert page.limit == 2
        assert len(page.items) == 2
        assert page.items[0].created_at >= page.items[1].created_at

    async def test_default_limit(self, service):
        page = await service.list_volunteers()

        assert page.limit == 50

    async def test_status_filter_and_unknown_status(self, service):
        first = await service.apply(_form(email="a@example.com"))
        await service.apply(_form(email="b@example.com"))
        await service.update_status(first.id, "approved")

        approved = await service.list_volunteers(status="approved")
        unknown = await service.list_volunteers(status="archived")

        assert [v.id for v in approved.items] == [first.id]
        assert unknown.total == 2

    async def test_search(self, service):
        await service.apply(_form(subjects="IELTS writing"))
        await service.apply(_form(email="other@example.com", subjects="Math"))

        page = await service.list_volunteers(q="ielts")

        assert page.total == 1

    async def test_update_status(self, service):
        stored = await service.apply(_form())

        assert await service.update_status(stored.id, "rejected") == "rejected"

    async def test_invalid_status(self, service):
        stored = await service.apply(_form())

        with pytest.raises(VolunteerValidationError) as exc_info:
            await service.update_status(stored.id, "maybe")

        assert "status" in exc_info.value.field_errors

    async def test_malformed_id(self, service):
        with pytest.raises(InvalidVolunteerIdError):
            await service.update_status("42", "approved")

    async def test_missing_application(self, service):
        with pytest.raises(VolunteerNotFoundError):
            await service.update_status(str(uuid4()), "approved")
