"""
TaskNest Backend — API Integration Tests
==========================================

What:  Drive the HTTP surface end to end against a throwaway SQLite database.
How:   `api_client` fixture (ASGITransport, real sessions, real bcrypt at
       minimum cost).
"""

import pytest
from unittest.mock import AsyncMock, patch

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession


async def create_profile(client, name, password="secret"):
    response = await client.post("/api/profiles", json={"name": name, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


async def create_checklist(client, profile_id, title):
    response = await client.post(
        "/api/checklists", json={"profile_id": profile_id, "title": title}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def create_task(client, checklist_id, title, **fields):
    payload = {"checklist_id": checklist_id, "title": title, **fields}
    response = await client.post("/api/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestProfiles:

    @pytest.mark.asyncio
    async def test_create_and_list_hides_password(self, api_client):
        created = await create_profile(api_client, "alice")
        assert created["name"] == "alice"

        response = await api_client.get("/api/profiles")

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["alice"]
        assert "password" not in response.text

    @pytest.mark.asyncio
    async def test_create_and_update_responses_hide_hash(self, api_client):
        created = await api_client.post(
            "/api/profiles", json={"name": "alice", "password": "secret"}
        )
        profile_id = created.json()["id"]

        renamed = await api_client.put(f"/api/profiles/{profile_id}", json={"name": "alice2"})
        repassworded = await api_client.put(
            f"/api/profiles/{profile_id}", json={"password": "secret2"}
        )
        login = await api_client.post(
            "/api/profiles/login", json={"profile_id": profile_id, "password": "secret2"}
        )

        assert created.status_code == 201
        assert renamed.status_code == 200
        assert repassworded.status_code == 200
        assert login.status_code == 200
        for response in (created, renamed, repassworded):
            assert "password_hash" not in response.text
            assert "secret" not in response.text

    @pytest.mark.asyncio
    async def test_duplicate_name_conflict(self, api_client):
        await create_profile(api_client, "alice")

        response = await api_client.post(
            "/api/profiles", json={"name": "alice", "password": "other"}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "Profile name already exists"

    @pytest.mark.asyncio
    async def test_missing_fields_rejected(self, api_client):
        response = await api_client.post("/api/profiles", json={"name": "alice"})

        assert response.status_code == 400
        body = response.json()
        assert "password" in body["error"]
        assert body["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_login(self, api_client):
        alice = await create_profile(api_client, "alice", "secret")

        ok = await api_client.post(
            "/api/profiles/login", json={"profile_id": alice["id"], "password": "secret"}
        )
        by_name = await api_client.post(
            "/api/profiles/login", json={"name": "alice", "password": "secret"}
        )
        wrong = await api_client.post(
            "/api/profiles/login", json={"profile_id": alice["id"], "password": "nope"}
        )

        assert ok.status_code == 200
        assert ok.json()["id"] == alice["id"]
        assert by_name.status_code == 200
        assert wrong.status_code == 401
        assert wrong.json()["error"] == "Invalid password"
        for response in (ok, by_name, wrong):
            assert "password_hash" not in response.text

    @pytest.mark.asyncio
    async def test_update_and_delete(self, api_client):
        alice = await create_profile(api_client, "alice")

        updated = await api_client.put(
            f"/api/profiles/{alice['id']}", json={"avatar_url": "https://img.example/a.png"}
        )
        deleted = await api_client.delete(f"/api/profiles/{alice['id']}")
        listed = await api_client.get("/api/profiles")

        assert updated.status_code == 200
        assert updated.json()["name"] == "alice"
        assert updated.json()["avatar_url"] == "https://img.example/a.png"
        assert deleted.status_code == 204
        assert listed.json() == []


class TestChecklistsAndTasks:

    @pytest.mark.asyncio
    async def test_checklist_crud(self, api_client):
        alice = await create_profile(api_client, "alice")
        checklist = await create_checklist(api_client, alice["id"], "Groceries")
        assert checklist["is_shared_copy"] is False

        renamed = await api_client.put(
            f"/api/checklists/{checklist['id']}", json={"title": "Weekly groceries"}
        )
        listed = await api_client.get("/api/checklists", params={"profile_id": alice["id"]})

        assert renamed.json()["title"] == "Weekly groceries"
        assert [c["title"] for c in listed.json()] == ["Weekly groceries"]

        deleted = await api_client.delete(f"/api/checklists/{checklist['id']}")
        missing = await api_client.get(f"/api/checklists/{checklist['id']}")
        assert deleted.status_code == 204
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_checklist_for_unknown_profile(self, api_client):
        response = await api_client.post(
            "/api/checklists",
            json={"profile_id": "00000000-0000-0000-0000-000000000000", "title": "Trip"},
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_password_confirmed_delete(self, api_client):
        alice = await create_profile(api_client, "alice", "secret")
        checklist = await create_checklist(api_client, alice["id"], "Trip")
        url = f"/api/checklists/{checklist['id']}/delete"

        refused = await api_client.post(url, json={"profile_id": alice["id"], "password": "bad"})
        still_there = await api_client.get(f"/api/checklists/{checklist['id']}")
        accepted = await api_client.post(url, json={"profile_id": alice["id"], "password": "secret"})
        gone = await api_client.get(f"/api/checklists/{checklist['id']}")

        assert refused.status_code == 401
        assert still_there.status_code == 200
        assert accepted.status_code == 204
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_tasks_listed_by_order(self, api_client):
        alice = await create_profile(api_client, "alice")
        checklist = await create_checklist(api_client, alice["id"], "Trip")
        await create_task(api_client, checklist["id"], "Third", order_num=2)
        await create_task(api_client, checklist["id"], "First", order_num=0)
        await create_task(api_client, checklist["id"], "Second", order_num=1)

        response = await api_client.get(f"/api/checklists/{checklist['id']}/tasks")

        assert [t["title"] for t in response.json()] == ["First", "Second", "Third"]

    @pytest.mark.asyncio
    async def test_partial_task_update(self, api_client):
        alice = await create_profile(api_client, "alice")
        checklist = await create_checklist(api_client, alice["id"], "Trip")
        task = await create_task(
            api_client, checklist["id"], "Pack", description="Carry-on only", allocated_time=30
        )

        response = await api_client.put(f"/api/tasks/{task['id']}", json={"is_completed": True})

        body = response.json()
        assert response.status_code == 200
        assert body["is_completed"] is True
        assert body["title"] == "Pack"
        assert body["description"] == "Carry-on only"
        assert body["allocated_time"] == 30

    @pytest.mark.asyncio
    async def test_parent_from_other_checklist_rejected(self, api_client):
        alice = await create_profile(api_client, "alice")
        trip = await create_checklist(api_client, alice["id"], "Trip")
        work = await create_checklist(api_client, alice["id"], "Work")
        foreign_parent = await create_task(api_client, work["id"], "Report")

        response = await api_client.post(
            "/api/tasks",
            json={"checklist_id": trip["id"], "parent_id": foreign_parent["id"], "title": "Pack"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_task(self, api_client):
        alice = await create_profile(api_client, "alice")
        checklist = await create_checklist(api_client, alice["id"], "Trip")
        task = await create_task(api_client, checklist["id"], "Pack")

        response = await api_client.delete(f"/api/tasks/{task['id']}")
        remaining = await api_client.get(f"/api/checklists/{checklist['id']}/tasks")

        assert response.status_code == 204
        assert remaining.json() == []


class TestSharing:

    @pytest.mark.asyncio
    async def test_accept_clones_task_tree(self, api_client):
        alice = await create_profile(api_client, "alice")
        bob = await create_profile(api_client, "bob")
        trip = await create_checklist(api_client, alice["id"], "Trip")
        pack = await create_task(api_client, trip["id"], "Pack")
        await create_task(api_client, trip["id"], "Shoes", parent_id=pack["id"])

        shared = await api_client.post(
            f"/api/checklists/{trip['id']}/share",
            json={"sender_id": alice["id"], "receiver_name": "bob"},
        )
        assert shared.status_code == 201
        assert shared.json()["status"] == "pending"

        pending = (await api_client.get(f"/api/profiles/{bob['id']}/share-requests")).json()
        assert len(pending) == 1
        assert pending[0]["checklist"]["title"] == "Trip"
        assert pending[0]["sender"]["name"] == "alice"

        accepted = await api_client.post(
            f"/api/share-requests/{pending[0]['id']}/respond", json={"action": "accept"}
        )
        assert accepted.status_code == 200
        assert accepted.json()["message"] == "Accepted and cloned checklist"

        bobs = (await api_client.get("/api/checklists", params={"profile_id": bob["id"]})).json()
        assert len(bobs) == 1
        copy = bobs[0]
        assert copy["title"] == "Trip"
        assert copy["is_shared_copy"] is True
        assert copy["id"] == accepted.json()["checklist_id"]

        tasks = (await api_client.get(f"/api/checklists/{copy['id']}/tasks")).json()
        by_title = {t["title"]: t for t in tasks}
        assert set(by_title) == {"Pack", "Shoes"}
        assert by_title["Pack"]["parent_id"] is None
        assert by_title["Shoes"]["parent_id"] == by_title["Pack"]["id"]
        assert by_title["Pack"]["id"] != pack["id"]

        # The sender's checklist is untouched
        originals = (await api_client.get(f"/api/checklists/{trip['id']}/tasks")).json()
        assert {t["id"] for t in originals}.isdisjoint({t["id"] for t in tasks})

        # Nothing left pending for bob
        assert (await api_client.get(f"/api/profiles/{bob['id']}/share-requests")).json() == []

    @pytest.mark.asyncio
    async def test_second_response_rejected(self, api_client):
        alice = await create_profile(api_client, "alice")
        bob = await create_profile(api_client, "bob")
        trip = await create_checklist(api_client, alice["id"], "Trip")
        shared = (
            await api_client.post(
                f"/api/checklists/{trip['id']}/share",
                json={"sender_id": alice["id"], "receiver_name": "bob"},
            )
        ).json()
        url = f"/api/share-requests/{shared['id']}/respond"

        first = await api_client.post(url, json={"action": "accept"})
        second = await api_client.post(url, json={"action": "accept"})

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()["error"] == "Request already processed"
        bobs = (await api_client.get("/api/checklists", params={"profile_id": bob["id"]})).json()
        assert len(bobs) == 1

    @pytest.mark.asyncio
    async def test_reject_creates_nothing(self, api_client):
        alice = await create_profile(api_client, "alice")
        bob = await create_profile(api_client, "bob")
        trip = await create_checklist(api_client, alice["id"], "Trip")
        shared = (
            await api_client.post(
                f"/api/checklists/{trip['id']}/share",
                json={"sender_id": alice["id"], "receiver_name": "bob"},
            )
        ).json()

        response = await api_client.post(
            f"/api/share-requests/{shared['id']}/respond", json={"action": "reject"}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Rejected share request"
        bobs = (await api_client.get("/api/checklists", params={"profile_id": bob["id"]})).json()
        assert bobs == []

    @pytest.mark.asyncio
    async def test_share_with_unknown_receiver(self, api_client):
        alice = await create_profile(api_client, "alice")
        trip = await create_checklist(api_client, alice["id"], "Trip")

        response = await api_client.post(
            f"/api/checklists/{trip['id']}/share",
            json={"sender_id": alice["id"], "receiver_name": "nobody"},
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_action(self, api_client):
        alice = await create_profile(api_client, "alice")
        await create_profile(api_client, "bob")
        trip = await create_checklist(api_client, alice["id"], "Trip")
        shared = (
            await api_client.post(
                f"/api/checklists/{trip['id']}/share",
                json={"sender_id": alice["id"], "receiver_name": "bob"},
            )
        ).json()

        response = await api_client.post(
            f"/api/share-requests/{shared['id']}/respond", json={"action": "later"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid action"


class TestTimerLogsAndHealth:

    @pytest.mark.asyncio
    async def test_logs_newest_first(self, api_client):
        alice = await create_profile(api_client, "alice")
        checklist = await create_checklist(api_client, alice["id"], "Study")
        url = f"/api/checklists/{checklist['id']}/timer-logs"

        for seconds in (60, 120, 180):
            response = await api_client.post(url, json={"elapsed_seconds": seconds})
            assert response.status_code == 201

        logs = (await api_client.get(url)).json()
        assert [log["elapsed_seconds"] for log in logs] == [180, 120, 60]

    @pytest.mark.asyncio
    async def test_negative_elapsed_rejected(self, api_client):
        alice = await create_profile(api_client, "alice")
        checklist = await create_checklist(api_client, alice["id"], "Study")

        response = await api_client.post(
            f"/api/checklists/{checklist['id']}/timer-logs", json={"elapsed_seconds": -5}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_health(self, api_client):
        response = await api_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"
        assert "X-Request-ID" in response.headers


class TestCloneIsolation:

    @pytest.mark.asyncio
    async def test_failed_task_insert_skipped_on_accept(self, api_client, db_engine):
        alice = await create_profile(api_client, "alice")
        bob = await create_profile(api_client, "bob")
        trip = await create_checklist(api_client, alice["id"], "Trip")
        pack = await create_task(api_client, trip["id"], "Pack")
        await create_task(api_client, trip["id"], "Shoes", parent_id=pack["id"])
        broken = await create_task(api_client, trip["id"], "Broken")
        await create_task(api_client, trip["id"], "Laces", parent_id=broken["id"])
        shared = (
            await api_client.post(
                f"/api/checklists/{trip['id']}/share",
                json={"sender_id": alice["id"], "receiver_name": "bob"},
            )
        ).json()

        # From here on, any insert of a task titled "Broken" fails
        async with db_engine.begin() as conn:
            await conn.exec_driver_sql(
                "CREATE TRIGGER reject_broken_task BEFORE INSERT ON tasks "
                "WHEN NEW.title = 'Broken' "
                "BEGIN SELECT RAISE(ABORT, 'task rejected'); END"
            )

        accepted = await api_client.post(
            f"/api/share-requests/{shared['id']}/respond", json={"action": "accept"}
        )

        assert accepted.status_code == 200
        copy_id = accepted.json()["checklist_id"]
        tasks = (await api_client.get(f"/api/checklists/{copy_id}/tasks")).json()
        by_title = {t["title"]: t for t in tasks}
        assert set(by_title) == {"Pack", "Shoes", "Laces"}
        assert by_title["Shoes"]["parent_id"] == by_title["Pack"]["id"]
        assert by_title["Laces"]["parent_id"] is None

        bobs = (await api_client.get("/api/checklists", params={"profile_id": bob["id"]})).json()
        assert [c["id"] for c in bobs] == [copy_id]


def failing_commit():
    return patch.object(
        AsyncSession,
        "commit",
        AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error"))),
    )


class TestCommitFailure:

    @pytest.mark.asyncio
    async def test_failed_commit_returns_500(self, api_client):
        with failing_commit():
            response = await api_client.post(
                "/api/profiles", json={"name": "alice", "password": "secret"}
            )

        assert response.status_code == 500
        assert response.json()["code"] == "server_error"
        assert (await api_client.get("/api/profiles")).json() == []

    @pytest.mark.asyncio
    async def test_failed_commit_rolls_back_accept(self, api_client):
        alice = await create_profile(api_client, "alice")
        bob = await create_profile(api_client, "bob")
        trip = await create_checklist(api_client, alice["id"], "Trip")
        await create_task(api_client, trip["id"], "Pack")
        shared = (
            await api_client.post(
                f"/api/checklists/{trip['id']}/share",
                json={"sender_id": alice["id"], "receiver_name": "bob"},
            )
        ).json()
        url = f"/api/share-requests/{shared['id']}/respond"

        with failing_commit():
            failed = await api_client.post(url, json={"action": "accept"})

        assert failed.status_code == 500
        assert "Accepted" not in failed.text
        pending = (await api_client.get(f"/api/profiles/{bob['id']}/share-requests")).json()
        assert [r["id"] for r in pending] == [shared["id"]]
        bobs = (await api_client.get("/api/checklists", params={"profile_id": bob["id"]})).json()
        assert bobs == []

        retried = await api_client.post(url, json={"action": "accept"})
        assert retried.status_code == 200
