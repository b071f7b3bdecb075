"""
Tests for audio asset storage and periodic housekeeping.
"""
import os
import time
from datetime import datetime, timedelta, timezone

import pytest

from mock_me.models.voice_interview import QuestionState, VoiceInterviewSession
from mock_me.services.housekeeping import Housekeeper
from mock_me.services.session_store import SessionStore


def make_old(path, hours):
    past = time.time() - hours * 3600
    os.utime(path, (past, past))


class TestAudioAssetStore:
    """Tests for the filesystem asset store."""

    @pytest.mark.asyncio
    async def test_save_upload_defaults_to_mp3(self, asset_store):
        path = await asset_store.save_upload(b"ID3", filename="blob")

        assert path.suffix == ".mp3"
        assert path.name.startswith("answer_")
        assert path.read_bytes() == b"ID3"
        assert asset_store.public_url(path) == f"/uploads/audio/{path.name}"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("filename,suffix", [
        ("answer.WEBM", ".webm"),
        ("answer.wav", ".wav"),
        ("evil.html", ".mp3"),
        ("payload.svg", ".mp3"),
        ("noext", ".mp3"),
        (None, ".mp3"),
    ])
    async def test_save_upload_only_keeps_audio_extensions(self, asset_store, filename, suffix):
        path = await asset_store.save_upload(b"data", filename=filename)

        assert path.suffix == suffix

    @pytest.mark.asyncio
    async def test_asset_names_do_not_collide(self, asset_store):
        paths = {asset_store.new_asset_path("audio", "wav") for _ in range(200)}
        assert len(paths) == 200

    @pytest.mark.asyncio
    async def test_delete(self, asset_store):
        path = await asset_store.save_bytes(b"RIFF", "audio", ".wav")

        assert await asset_store.delete(path) is True
        assert await asset_store.delete(path) is False

    @pytest.mark.asyncio
    async def test_prune_older_than(self, asset_store):
        old = await asset_store.save_bytes(b"old", "audio", ".mp3")
        fresh = await asset_store.save_bytes(b"fresh", "audio", ".mp3")
        make_old(old, hours=30)

        removed = await asset_store.prune_older_than(24 * 3600)

        assert removed == 1
        assert not old.exists()
        assert fresh.exists()


class TestHousekeeper:
    """Tests for a single housekeeping pass."""

    def _session(self, session_id, age):
        return VoiceInterviewSession(
            session_id=session_id,
            interview_id="iv",
            user_id="u",
            questions=[QuestionState(id="q", question="Q?", question_order=1)],
            started_at=datetime.now(timezone.utc) - age,
        )

    @pytest.mark.asyncio
    async def test_run_once_reaps_and_prunes(self, asset_store):
        store = SessionStore()
        store.create(self._session("stale", timedelta(hours=4)))
        store.create(self._session("live", timedelta(minutes=1)))
        old = await asset_store.save_bytes(b"old", "audio", ".mp3")
        make_old(old, hours=5)

        housekeeper = Housekeeper(store, asset_store, session_ttl_minutes=180, audio_retention_hours=2)
        report = await housekeeper.run_once()

        assert report == {"sessions_reaped": 1, "assets_pruned": 1}
        assert "live" in store
        assert "stale" not in store

    @pytest.mark.asyncio
    async def test_zero_retention_keeps_audio(self, asset_store):
        old = await asset_store.save_bytes(b"old", "audio", ".mp3")
        make_old(old, hours=500)

        housekeeper = Housekeeper(SessionStore(), asset_store, audio_retention_hours=0)
        report = await housekeeper.run_once()

        assert report["assets_pruned"] == 0
        assert old.exists()

    @pytest.mark.asyncio
    async def test_start_and_stop(self, asset_store):
        housekeeper = Housekeeper(SessionStore(), asset_store, interval_seconds=3600)

        housekeeper.start()
        assert housekeeper._task is not None
        await housekeeper.stop()
        assert housekeeper._task is None
