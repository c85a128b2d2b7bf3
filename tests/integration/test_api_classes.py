# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the class catalog endpoints."""

from uuid import uuid4

import pytest


class TestCreateClass:
    """Tests for POST /api/classes."""

    async def test_created(self, client, admin, class_body):
        staff = await admin()

        response = await client.post("/api/classes", json=class_body(), headers=staff.headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Class created successfully"
        assert body["class"]["level"] == 1
        assert body["class"]["ageGroup"] == "adult"
        assert body["class"]["isEnrollmentOpen"] is True
        assert body["class"]["roster"] == []

    async def test_duplicate_carries_existing_class(self, client, admin, class_body):
        staff = await admin()
        first = await client.post("/api/classes", json=class_body(), headers=staff.headers)

        response = await client.post("/api/classes", json=class_body(), headers=staff.headers)

        assert response.status_code == 409
        assert response.json()["message"] == "Class already exists"
        assert response.json()["class"]["id"] == first.json()["class"]["id"]

    async def test_different_schedule_is_not_duplicate(self, client, admin, class_body):
        staff = await admin()
        await client.post("/api/classes", json=class_body(), headers=staff.headers)
        schedule = [{"day": "Tuesday", "startTime": "18:00", "endTime": "19:00"}]

        response = await client.post(
            "/api/classes", json=class_body(schedule=schedule), headers=staff.headers
        )

        assert response.status_code == 201

    async def test_requires_staff(self, client, seed_user, class_body):
        student = await seed_user()

        response = await client.post("/api/classes", json=class_body(), headers=student.headers)

        assert response.status_code == 403

    @pytest.mark.parametrize("level", ["advanced", 99999999999999999999])
    async def test_invalid_level(self, client, admin, class_body, level):
        staff = await admin()

        response = await client.post(
            "/api/classes", json=class_body(level=level), headers=staff.headers
        )

        assert response.status_code == 400
        assert "level" in response.json()["fields"]


class TestListClasses:
    """Tests for the public class listings."""

    async def test_numeric_and_all(self, client, admin, class_body):
        staff = await admin()
        await client.post("/api/classes", json=class_body(level=2), headers=staff.headers)
        await client.post(
            "/api/classes/conversations",
            json=class_body(instructor="Mahire"),
            headers=staff.headers,
        )

        numeric = await client.get("/api/classes")
        everything = await client.get("/api/all-classes")

        assert [c["level"] for c in numeric.json()] == [2]
        assert sorted(str(c["level"]) for c in everything.json()) == ["2", "conversation"]

    async def test_filters(self, client, admin, class_body):
        staff = await admin()
        await client.post("/api/classes", json=class_body(level=1), headers=staff.headers)
        await client.post(
            "/api/classes",
            json=class_body(level=2, instructor="Mahire", ageGroup="child"),
            headers=staff.headers,
        )

        by_level = await client.get("/api/classes", params={"level": "2"})
        by_age = await client.get("/api/classes", params={"ageGroup": "child"})
        by_instructor = await client.get("/api/classes", params={"instructor": "Aynur"})

        assert [c["level"] for c in by_level.json()] == [2]
        assert [c["instructor"] for c in by_age.json()] == ["Mahire"]
        assert [c["level"] for c in by_instructor.json()] == [1]


class TestClassById:
    """Tests for reading, updating and deleting one class."""

    async def test_get(self, client, admin, class_body):
        staff = await admin()
        created = await client.post("/api/classes", json=class_body(), headers=staff.headers)
        class_id = created.json()["class"]["id"]

        response = await client.get(f"/api/classes/{class_id}")

        assert response.status_code == 200
        assert response.json()["link"] == "https://meet.example.com/level-1"

    async def test_invalid_and_missing(self, client):
        invalid = await client.get("/api/classes/not-an-id")
        missing = await client.get(f"/api/classes/{uuid4()}")

        assert invalid.status_code == 400
        assert missing.status_code == 404

    async def test_partial_update(self, client, admin, class_body):
        staff = await admin()
        created = await client.post("/api/classes", json=class_body(), headers=staff.headers)
        class_id = created.json()["class"]["id"]

        response = await client.put(
            f"/api/classes/{class_id}",
            json={"isEnrollmentOpen": False},
            headers=staff.headers,
        )

        assert response.status_code == 200
        assert response.json()["isEnrollmentOpen"] is False
        assert response.json()["instructor"] == "Aynur"

    async def test_update_into_duplicate(self, client, admin, class_body):
        staff = await admin()
        first = await client.post("/api/classes", json=class_body(), headers=staff.headers)
        second = await client.post(
            "/api/classes", json=class_body(instructor="Mahire"), headers=staff.headers
        )

        response = await client.put(
            f"/api/classes/{second.json()['class']['id']}",
            json={"instructor": "Aynur"},
            headers=staff.headers,
        )

        assert response.status_code == 409
        assert response.json()["class"]["id"] == first.json()["class"]["id"]

    async def test_delete_clears_enrollments(self, client, admin, seed_user, class_body):
        staff = await admin()
        student = await seed_user()
        created = await client.post("/api/classes", json=class_body(), headers=staff.headers)
        class_id = created.json()["class"]["id"]
        await client.post(
            f"/api/users/{student.id}/enroll", json={"classId": class_id}, headers=student.headers
        )

        response = await client.delete(f"/api/classes/{class_id}", headers=staff.headers)

        assert response.status_code == 204
        assert (await client.get(f"/api/classes/{class_id}")).status_code == 404
        profile = await client.get("/api/user", headers=student.headers)
        assert profile.json()["enrolledClasses"] == []

    async def test_class_students(self, client, admin, seed_user, class_body):
        staff = await admin()
        student = await seed_user(first_name="Nurgul")
        created = await client.post("/api/classes", json=class_body(), headers=staff.headers)
        class_id = created.json()["class"]["id"]
        await client.post(
            f"/api/users/{student.id}/enroll", json={"classId": class_id}, headers=student.headers
        )

        response = await client.get(
            f"/api/classes/class-students/{class_id}", headers=staff.headers
        )

        assert response.status_code == 200
        assert [s["firstName"] for s in response.json()] == ["Nurgul"]


class TestTrackClasses:
    """Tests for the conversation and IELTS class routes."""

    async def test_conversation_lifecycle(self, client, admin, class_body):
        staff = await admin()
        body = class_body()
        body.pop("level")

        created = await client.post("/api/classes/conversations", json=body, headers=staff.headers)
        duplicate = await client.post(
            "/api/classes/conversations", json=body, headers=staff.headers
        )
        class_id = created.json()["class"]["id"]
        listed = await client.get("/api/classes/conversations")
        deleted = await client.delete(
            f"/api/classes/conversations/{class_id}", headers=staff.headers
        )

        assert created.status_code == 201
        assert created.json()["message"] == "Conversation created successfully"
        assert created.json()["class"]["level"] == "conversation"
        assert duplicate.status_code == 409
        assert duplicate.json()["message"] == "Conversation class already exists"
        assert [c["id"] for c in listed.json()] == [class_id]
        assert deleted.status_code == 204

    async def test_ielts_route_ignores_other_tracks(self, client, admin, class_body):
        staff = await admin()
        numeric = await client.post("/api/classes", json=class_body(), headers=staff.headers)

        response = await client.get(f"/api/classes/ielts/{numeric.json()['class']['id']}")

        assert response.status_code == 404
        assert response.json()["detail"] == "IELTS class not found"

    async def test_ielts_create(self, client, admin, class_body):
        staff = await admin()
        body = class_body()
        body.pop("level")

        response = await client.post("/api/classes/ielts", json=body, headers=staff.headers)

        assert response.status_code == 201
        assert response.json()["message"] == "IELTS class created successfully"
        assert response.json()["class"]["level"] == "ielts"
