"""Tests for release creation, the catalog and the moderation lifecycle over HTTP."""

from tests.conftest import PASSWORD, auth_headers, create_release, set_status

MODERATOR_ACTIONS = {"view_as_moderator", "assign_upc", "assign_isrc", "approve", "reject"}


class TestCreateRelease:
    async def test_create_digital_release(self, client, artist):
        release = await create_release(client, artist, has_upc=True, upc="123456789012")

        assert release["status"] == "In Progress"
        assert release["upc"] == "123456789012"
        assert release["created_by"] == str(artist.id)
        # Everything selected until narrowed down
        assert "Germany" in release["selected_territories"]
        assert "Spotify" in release["selected_services"]

    async def test_upc_not_stored_unless_supplied(self, client, artist):
        release = await create_release(client, artist, has_upc=False, upc="999")
        assert release["upc"] is None

    async def test_missing_required_fields(self, client, artist):
        response = await client.post(
            "/api/releases/",
            json={"release_type": "Digital", "format": "Single", "release_name": ""},
            headers=auth_headers(artist),
        )
        assert response.status_code == 422
        assert response.json()["detail"] == ["Please fill in all required fields"]

    async def test_regular_user_cannot_create_music_video(self, client, artist):
        response = await client.post(
            "/api/releases/",
            json={"release_type": "Music Video", "format": "Single", "release_name": "Clip", "catalog_number": "MV-1"},
            headers=auth_headers(artist),
        )
        assert response.status_code == 422

    async def test_requires_sign_in(self, client):
        response = await client.get("/api/releases/")
        assert response.status_code == 401


class TestCatalog:
    async def test_regular_user_sees_only_own_releases(self, client, artist, other_artist):
        mine = await create_release(client, artist, release_name="Mine")
        await create_release(client, other_artist, release_name="Theirs")

        response = await client.get("/api/releases/", headers=auth_headers(artist))
        assert response.status_code == 200
        entries = response.json()
        assert [entry["id"] for entry in entries] == [mine["id"]]
        assert entries[0]["artists_display"] == "No artists"
        assert set(entries[0]["actions"]) == {"edit", "take_down"}
        assert not MODERATOR_ACTIONS & set(entries[0]["actions"])

    async def test_status_filter(self, client, artist):
        first = await create_release(client, artist, release_name="One", catalog_number="C-1")
        await create_release(client, artist, release_name="Two", catalog_number="C-2")
        await set_status(first["id"], "Error")

        response = await client.get("/api/releases/", params={"status": "Error"}, headers=auth_headers(artist))
        assert [entry["id"] for entry in response.json()] == [first["id"]]

    async def test_newest_first(self, client, artist):
        first = await create_release(client, artist, release_name="One", catalog_number="C-1")
        second = await create_release(client, artist, release_name="Two", catalog_number="C-2")

        response = await client.get("/api/releases/", headers=auth_headers(artist))
        assert [entry["id"] for entry in response.json()] == [second["id"], first["id"]]

    async def test_moderator_sees_moderation_queue(self, client, artist, moderator):
        queued = await create_release(client, artist, release_name="Queued", catalog_number="C-1")
        await create_release(client, artist, release_name="Draft", catalog_number="C-2")
        await set_status(queued["id"], "Moderation")

        response = await client.get("/api/releases/", headers=auth_headers(moderator))
        entries = response.json()
        assert [entry["id"] for entry in entries] == [queued["id"]]
        assert MODERATOR_ACTIONS <= set(entries[0]["actions"])

    async def test_artists_display(self, client, artist):
        release = await create_release(client, artist)
        await client.patch(
            f"/api/releases/{release['id']}",
            json={"primary_artists": ["Nova", "Echo"], "featured_artists": ["Vox"]},
            headers=auth_headers(artist),
        )

        entries = (await client.get("/api/releases/", headers=auth_headers(artist))).json()
        assert entries[0]["artists_display"] == "Nova, Echo feat. Vox"

    async def test_released_list_is_moderator_only(self, client, artist, moderator):
        release = await create_release(client, artist)
        await set_status(release["id"], "Sent to Stores")

        assert (await client.get("/api/releases/released", headers=auth_headers(artist))).status_code == 403

        response = await client.get("/api/releases/released", headers=auth_headers(moderator))
        assert [entry["id"] for entry in response.json()] == [release["id"]]


class TestEditing:
    async def test_creator_cannot_change_upc_or_catalog_number(self, client, artist):
        release = await create_release(client, artist)

        for field in ("upc", "catalog_number", "status"):
            response = await client.patch(
                f"/api/releases/{release['id']}", json={field: "X"}, headers=auth_headers(artist)
            )
            assert response.status_code == 422

    async def test_strangers_cannot_edit(self, client, artist, other_artist):
        release = await create_release(client, artist)
        response = await client.patch(
            f"/api/releases/{release['id']}", json={"genre": "Pop"}, headers=auth_headers(other_artist)
        )
        assert response.status_code == 403

    async def test_live_release_must_be_opened_first(self, client, artist):
        release = await create_release(client, artist)
        await set_status(release["id"], "Sent to Stores")

        response = await client.patch(
            f"/api/releases/{release['id']}", json={"genre": "Pop"}, headers=auth_headers(artist)
        )
        assert response.status_code == 409

        response = await client.post(f"/api/releases/{release['id']}/edit", headers=auth_headers(artist))
        assert response.json()["status"] == "Moderation"

        response = await client.patch(
            f"/api/releases/{release['id']}", json={"genre": "Pop"}, headers=auth_headers(artist)
        )
        assert response.status_code == 200
        assert response.json()["genre"] == "Pop"

    async def test_missing_release(self, client, artist):
        response = await client.get(
            "/api/releases/00000000-0000-0000-0000-000000000000", headers=auth_headers(artist)
        )
        assert response.status_code == 404


class TestModeration:
    async def test_non_moderator_is_refused(self, client, artist):
        release = await create_release(client, artist)
        await set_status(release["id"], "Moderation")
        headers = auth_headers(artist)

        assert (await client.post(f"/api/releases/{release['id']}/approve", headers=headers)).status_code == 403
        assert (await client.post(
            f"/api/releases/{release['id']}/reject", json={"reason": "no"}, headers=headers
        )).status_code == 403
        assert (await client.put(
            f"/api/releases/{release['id']}/upc", json={"upc": "1"}, headers=headers
        )).status_code == 403

    async def test_approve(self, client, artist, moderator):
        release = await create_release(client, artist)
        await set_status(release["id"], "Moderation")

        response = await client.post(f"/api/releases/{release['id']}/approve", headers=auth_headers(moderator))
        assert response.status_code == 200
        assert response.json()["status"] == "Sent to Stores"

    async def test_approve_outside_moderation(self, client, artist, moderator):
        release = await create_release(client, artist)

        response = await client.post(f"/api/releases/{release['id']}/approve", headers=auth_headers(moderator))
        assert response.status_code == 409

    async def test_reject_requires_reason(self, client, artist, moderator):
        release = await create_release(client, artist)
        await set_status(release["id"], "Moderation")

        response = await client.post(
            f"/api/releases/{release['id']}/reject", json={"reason": "  "}, headers=auth_headers(moderator)
        )
        assert response.status_code == 422
        assert response.json()["detail"] == ["Please provide a reason for rejection"]

        stored = (await client.get(f"/api/releases/{release['id']}", headers=auth_headers(artist))).json()
        assert stored["status"] == "Moderation"
        assert stored["rejection_reason"] is None

    async def test_reject(self, client, artist, moderator):
        release = await create_release(client, artist)
        await set_status(release["id"], "Moderation")

        response = await client.post(
            f"/api/releases/{release['id']}/reject",
            json={"reason": "Cover has a watermark"},
            headers=auth_headers(moderator),
        )
        assert response.json()["status"] == "Error"
        assert response.json()["rejection_reason"] == "Cover has a watermark"

    async def test_assign_upc(self, client, artist, moderator):
        release = await create_release(client, artist)

        response = await client.put(
            f"/api/releases/{release['id']}/upc", json={"upc": " 123456789012 "}, headers=auth_headers(moderator)
        )
        assert response.status_code == 200
        assert response.json()["upc"] == "123456789012"


class TestTakeDown:
    async def intent(self, client, user, release_id):
        response = await client.post(f"/api/releases/{release_id}/takedown/intent", headers=auth_headers(user))
        assert response.status_code == 200, response.text
        return response.json()["confirmation_token"]

    async def test_intent_alone_changes_nothing(self, client, artist):
        release = await create_release(client, artist)
        await self.intent(client, artist, release["id"])

        stored = (await client.get(f"/api/releases/{release['id']}", headers=auth_headers(artist))).json()
        assert stored["status"] == "In Progress"

    async def test_password_is_required(self, client, artist):
        release = await create_release(client, artist)
        token = await self.intent(client, artist, release["id"])

        response = await client.post(
            f"/api/releases/{release['id']}/takedown",
            json={"confirmation_token": token, "password": ""},
            headers=auth_headers(artist),
        )
        assert response.status_code == 422

    async def test_wrong_password(self, client, artist):
        release = await create_release(client, artist)
        token = await self.intent(client, artist, release["id"])

        response = await client.post(
            f"/api/releases/{release['id']}/takedown",
            json={"confirmation_token": token, "password": "wrong-password"},
            headers=auth_headers(artist),
        )
        assert response.status_code == 400

        stored = (await client.get(f"/api/releases/{release['id']}", headers=auth_headers(artist))).json()
        assert stored["status"] == "In Progress"

    async def test_take_down(self, client, artist):
        release = await create_release(client, artist)
        await set_status(release["id"], "Sent to Stores")
        token = await self.intent(client, artist, release["id"])

        response = await client.post(
            f"/api/releases/{release['id']}/takedown",
            json={"confirmation_token": token, "password": PASSWORD},
            headers=auth_headers(artist),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "Taken Down"

        # Already taken down
        response = await client.post(
            f"/api/releases/{release['id']}/takedown/intent", headers=auth_headers(artist)
        )
        assert response.status_code == 409

    async def test_token_is_bound_to_release(self, client, artist):
        first = await create_release(client, artist, catalog_number="C-1")
        second = await create_release(client, artist, catalog_number="C-2")
        token = await self.intent(client, artist, first["id"])

        response = await client.post(
            f"/api/releases/{second['id']}/takedown",
            json={"confirmation_token": token, "password": PASSWORD},
            headers=auth_headers(artist),
        )
        assert response.status_code == 403

    async def test_access_token_is_not_a_confirmation(self, client, artist):
        release = await create_release(client, artist)
        headers = auth_headers(artist)
        access_token = headers["Authorization"].split(" ", 1)[1]

        response = await client.post(
            f"/api/releases/{release['id']}/takedown",
            json={"confirmation_token": access_token, "password": PASSWORD},
            headers=headers,
        )
        assert response.status_code == 401
