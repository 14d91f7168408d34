"""Tests for the release builder wizard: section order, drafts and the overview merge."""

import uuid

from release_builder.models.wizard import WizardSession
from release_builder.services.database import SessionLocal
from release_builder.services.draft_store import DraftStore
from tests.conftest import auth_headers, create_release, image_bytes, set_status, wav_bytes

AUDIO_ORDER = ["basic-info", "artwork", "tracks", "scheduling", "territories", "publishing", "overview"]
VIDEO_ORDER = ["basic-info", "thumbnail", "video", "scheduling", "territories", "overview"]


async def start(client, user, release_id) -> dict:
    response = await client.post(f"/api/wizard/releases/{release_id}", headers=auth_headers(user))
    assert response.status_code == 201, response.text
    return response.json()


async def save(client, user, session_id, section, values=None):
    return await client.post(
        f"/api/wizard/{session_id}/sections/{section}/save",
        json=values or {},
        headers=auth_headers(user),
    )


async def walk_to_overview(client, user, session_id, sections, values=None):
    values = values or {}
    for section in sections[:-1]:
        response = await save(client, user, session_id, section, values.get(section))
        assert response.status_code == 200, response.text
    return response.json()


class TestSectionOrder:
    async def test_digital_release_sections(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        assert session["sections"] == AUDIO_ORDER
        assert session["current_section"] == "basic-info"
        assert session["visited_sections"] == ["basic-info"]

    async def test_music_video_sections(self, client, label_admin):
        release = await create_release(client, label_admin, release_type="Music Video")
        session = await start(client, label_admin, release["id"])
        assert session["sections"] == VIDEO_ORDER

    async def test_reaching_overview_visits_every_section_once_in_order(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        final = await walk_to_overview(client, artist, session["id"], AUDIO_ORDER)

        assert final["current_section"] == "overview"
        assert final["visited_sections"] == AUDIO_ORDER

    async def test_forward_jump_is_refused(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        response = await client.post(f"/api/wizard/{session['id']}/goto/overview", headers=auth_headers(artist))
        assert response.status_code == 409

    async def test_only_current_section_can_be_saved(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        response = await save(client, artist, session["id"], "scheduling", {"pricing": "low"})
        assert response.status_code == 409

    async def test_jump_back_keeps_visited_list(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])
        await save(client, artist, session["id"], "basic-info")
        await save(client, artist, session["id"], "artwork")

        response = await client.post(f"/api/wizard/{session['id']}/goto/basic-info", headers=auth_headers(artist))
        assert response.status_code == 200
        assert response.json()["current_section"] == "basic-info"

        # Saving again moves on without duplicating entries
        response = await save(client, artist, session["id"], "basic-info")
        assert response.json()["current_section"] == "artwork"
        assert response.json()["visited_sections"] == ["basic-info", "artwork", "tracks"]

    async def test_unknown_section_for_release_type(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        response = await client.get(f"/api/wizard/{session['id']}/sections/video", headers=auth_headers(artist))
        assert response.status_code == 404

    async def test_other_users_cannot_use_session(self, client, artist, other_artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        response = await client.get(f"/api/wizard/{session['id']}", headers=auth_headers(other_artist))
        assert response.status_code == 403


class TestSectionData:
    async def test_save_writes_release_row(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        response = await save(client, artist, session["id"], "basic-info", {
            "primary_artists": [" Nova ", "", "Nova"],
            "genre": "Pop",
        })
        assert response.status_code == 200

        stored = (await client.get(f"/api/releases/{release['id']}", headers=auth_headers(artist))).json()
        assert stored["primary_artists"] == ["Nova", "Nova"]
        assert stored["genre"] == "Pop"

    async def test_fields_of_other_sections_are_refused(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        response = await save(client, artist, session["id"], "basic-info", {"upc": "123", "release_name": "X"})
        assert response.status_code == 422

        stored = (await client.get(f"/api/releases/{release['id']}", headers=auth_headers(artist))).json()
        assert stored["upc"] is None
        assert stored["release_name"] == "First Light"

    async def test_autosave_does_not_touch_release_row(self, client, artist):
        release = await create_release(client, artist, release_name="A")
        session = await start(client, artist, release["id"])

        response = await client.put(
            f"/api/wizard/{session['id']}/drafts/basic-info",
            json={"release_name": "B"},
            headers=auth_headers(artist),
        )
        assert response.status_code == 200
        assert response.json()["key"] == "basicInfoData"

        view = (await client.get(f"/api/wizard/{session['id']}/sections/basic-info", headers=auth_headers(artist))).json()
        assert view["values"]["release_name"] == "B"

        stored = (await client.get(f"/api/releases/{release['id']}", headers=auth_headers(artist))).json()
        assert stored["release_name"] == "A"

    async def test_sections_without_drafts(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])
        await save(client, artist, session["id"], "basic-info")

        response = await client.put(
            f"/api/wizard/{session['id']}/drafts/artwork",
            json={},
            headers=auth_headers(artist),
        )
        assert response.status_code == 409

    async def test_draft_wins_over_backend_in_overview(self, client, artist):
        release = await create_release(client, artist, release_name="A")
        session = await start(client, artist, release["id"])
        await client.put(
            f"/api/wizard/{session['id']}/drafts/basic-info",
            json={"release_name": "B"},
            headers=auth_headers(artist),
        )

        await walk_to_overview(client, artist, session["id"], AUDIO_ORDER)

        overview = (await client.get(f"/api/wizard/{session['id']}/overview", headers=auth_headers(artist))).json()
        assert overview["release"]["release_name"] == "B"

    async def test_saved_values_win_over_drafts(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])
        await client.put(
            f"/api/wizard/{session['id']}/drafts/basic-info",
            json={"genre": "Rock"},
            headers=auth_headers(artist),
        )

        await walk_to_overview(client, artist, session["id"], AUDIO_ORDER, {"basic-info": {"genre": "Jazz"}})

        overview = (await client.get(f"/api/wizard/{session['id']}/overview", headers=auth_headers(artist))).json()
        assert overview["release"]["genre"] == "Jazz"

    async def test_edit_after_going_back_wins_over_saved_value(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])
        await save(client, artist, session["id"], "basic-info", {"genre": "Pop"})
        await client.post(f"/api/wizard/{session['id']}/goto/basic-info", headers=auth_headers(artist))

        await client.put(
            f"/api/wizard/{session['id']}/drafts/basic-info",
            json={"genre": "Rock"},
            headers=auth_headers(artist),
        )

        view = (await client.get(f"/api/wizard/{session['id']}/sections/basic-info", headers=auth_headers(artist))).json()
        assert view["values"]["genre"] == "Rock"

    async def test_autosave_before_reaching_section_is_refused(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        response = await client.put(
            f"/api/wizard/{session['id']}/drafts/publishing",
            json={"publisher_name": "Somebody"},
            headers=auth_headers(artist),
        )
        assert response.status_code == 409

        async with SessionLocal() as db:
            assert await DraftStore(db).read_all(uuid.UUID(session["id"])) == {}

    async def test_overview_before_reaching_it(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        response = await client.get(f"/api/wizard/{session['id']}/overview", headers=auth_headers(artist))
        assert response.status_code == 409


class TestMediaSections:
    async def test_artwork_url_cannot_be_saved_through_the_wizard(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])
        await save(client, artist, session["id"], "basic-info")

        response = await save(client, artist, session["id"], "artwork", {"artwork_url": "http://elsewhere/cover.gif"})
        assert response.status_code == 422

        stored = (await client.get(f"/api/releases/{release['id']}", headers=auth_headers(artist))).json()
        assert stored["artwork_url"] is None

        session_state = (await client.get(f"/api/wizard/{session['id']}", headers=auth_headers(artist))).json()
        assert session_state["current_section"] == "artwork"

    async def test_video_url_cannot_be_saved_through_the_wizard(self, client, label_admin):
        release = await create_release(client, label_admin, release_type="Music Video")
        session = await start(client, label_admin, release["id"])
        await save(client, label_admin, session["id"], "basic-info")
        await save(client, label_admin, session["id"], "thumbnail")

        response = await save(client, label_admin, session["id"], "video", {"video_url": "http://elsewhere/clip.mp4"})
        assert response.status_code == 422

    async def test_artwork_section_shows_uploaded_file(self, client, artist):
        release = await create_release(client, artist)
        uploaded = await client.post(
            f"/api/releases/{release['id']}/artwork",
            files={"file": ("cover.png", image_bytes(3000, 3000), "image/png")},
            headers=auth_headers(artist),
        )
        session = await start(client, artist, release["id"])
        await save(client, artist, session["id"], "basic-info")

        view = (await client.get(f"/api/wizard/{session['id']}/sections/artwork", headers=auth_headers(artist))).json()
        assert view["values"] == {"artwork_url": uploaded.json()["artwork_url"]}


class TestSubmit:
    async def prepare(self, client, user):
        release = await create_release(client, user)
        headers = auth_headers(user)
        artwork = await client.post(
            f"/api/releases/{release['id']}/artwork",
            files={"file": ("cover.png", image_bytes(3000, 3000), "image/png")},
            headers=headers,
        )
        assert artwork.status_code == 200, artwork.text
        track = await client.post(
            f"/api/releases/{release['id']}/tracks",
            files={"file": ("Intro.wav", wav_bytes(), "audio/wav")},
            headers=headers,
        )
        assert track.status_code == 201, track.text
        return release

    async def test_incomplete_release_is_refused(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])
        await walk_to_overview(client, artist, session["id"], AUDIO_ORDER)

        overview = (await client.get(f"/api/wizard/{session['id']}/overview", headers=auth_headers(artist))).json()
        assert overview["can_submit"] is False
        assert "Please add at least one primary artist" in overview["errors"]

        response = await client.post(f"/api/wizard/{session['id']}/submit", headers=auth_headers(artist))
        assert response.status_code == 422
        assert response.json()["detail"] == overview["errors"]

    async def test_submit_moves_to_moderation_and_clears_drafts(self, client, artist):
        release = await self.prepare(client, artist)
        session = await start(client, artist, release["id"])
        await client.put(
            f"/api/wizard/{session['id']}/drafts/basic-info",
            json={"subgenre": "Indie Pop"},
            headers=auth_headers(artist),
        )
        await walk_to_overview(client, artist, session["id"], AUDIO_ORDER, {
            "basic-info": {"primary_artists": ["Nova"], "genre": "Pop", "metadata_language": "en"},
            "scheduling": {"release_date": "2026-12-01"},
        })

        response = await client.post(f"/api/wizard/{session['id']}/submit", headers=auth_headers(artist))
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["release"]["status"] == "Moderation"
        assert body["session"]["submitted_at"] is not None

        session_id = uuid.UUID(body["session"]["id"])
        async with SessionLocal() as db:
            assert await DraftStore(db).read_all(session_id) == {}
            stored_session = await db.get(WizardSession, session_id)
            assert stored_session.submitted_at is not None

        # A submitted session is closed
        response = await save(client, artist, session["id"], "overview")
        assert response.status_code == 409

    async def test_submitted_release_matches_the_overview(self, client, artist):
        release = await self.prepare(client, artist)
        session = await start(client, artist, release["id"])
        # Basic info only ever reaches the draft, every section is saved empty
        await client.put(
            f"/api/wizard/{session['id']}/drafts/basic-info",
            json={"primary_artists": ["Nova"], "genre": "Pop", "metadata_language": "en"},
            headers=auth_headers(artist),
        )
        await walk_to_overview(client, artist, session["id"], AUDIO_ORDER, {
            "scheduling": {"release_date": "2026-12-01"},
        })

        overview = (await client.get(f"/api/wizard/{session['id']}/overview", headers=auth_headers(artist))).json()
        assert overview["errors"] == []

        response = await client.post(f"/api/wizard/{session['id']}/submit", headers=auth_headers(artist))
        assert response.status_code == 200, response.text

        stored = (await client.get(f"/api/releases/{release['id']}", headers=auth_headers(artist))).json()
        assert stored["status"] == "Moderation"
        for field in ("primary_artists", "genre", "metadata_language", "release_date", "artwork_url"):
            assert stored[field] == overview["release"][field]
        assert stored["primary_artists"] == ["Nova"]

    async def test_submit_only_from_overview(self, client, artist):
        release = await create_release(client, artist)
        session = await start(client, artist, release["id"])

        response = await client.post(f"/api/wizard/{session['id']}/submit", headers=auth_headers(artist))
        assert response.status_code == 409


class TestEditEntry:
    async def test_opening_live_release_sends_it_to_moderation(self, client, artist):
        release = await create_release(client, artist)
        await set_status(release["id"], "Sent to Stores")

        session = await start(client, artist, release["id"])
        assert session["current_section"] == "basic-info"

        stored = (await client.get(f"/api/releases/{release['id']}", headers=auth_headers(artist))).json()
        assert stored["status"] == "Moderation"

    async def test_opening_in_progress_release_keeps_status(self, client, artist):
        release = await create_release(client, artist)
        await start(client, artist, release["id"])

        stored = (await client.get(f"/api/releases/{release['id']}", headers=auth_headers(artist))).json()
        assert stored["status"] == "In Progress"
