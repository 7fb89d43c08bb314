"""Unit tests for StoryLogService."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cuentos.api.models.records import StoryLogRecord
from cuentos.api.services.story_log_service import StoryLogService, permalink
from cuentos.core.errors import NarrationFailed, PersistenceUnavailable, StoryNotFound

STORY_ID = "0b5e7c2e-8d7a-4a43-9f2e-2f1f9b1a5c11"


@pytest.fixture
def mock_repo():
    repo = MagicMock()
    repo.create_story_log = AsyncMock(return_value=STORY_ID)
    repo.get_story_log = AsyncMock(return_value=None)
    repo.mark_listened = AsyncMock(return_value=True)
    repo.update_audio = AsyncMock(return_value=True)
    repo.update_share_message = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def service(mock_repo):
    return StoryLogService(mock_repo)


@pytest.fixture
def record(sample_story):
    return StoryLogRecord(
        id=STORY_ID,
        concept="la fotosíntesis",
        interests="el fútbol",
        story_content=json.dumps(sample_story.to_dict()),
    )


def test_permalink():
    assert permalink("abc").endswith("/story/abc")


class TestLogStory:

    @pytest.mark.asyncio
    async def test_returns_new_id(self, service, mock_repo, sample_story):
        story_id = await service.log_story("la fotosíntesis", "el fútbol", sample_story)

        assert story_id == STORY_ID
        mock_repo.create_story_log.assert_awaited_once_with("la fotosíntesis", "el fútbol", sample_story)

    @pytest.mark.asyncio
    async def test_swallows_insert_failure(self, service, mock_repo, sample_story, caplog):
        mock_repo.create_story_log.side_effect = ConnectionError("db down")

        story_id = await service.log_story("la fotosíntesis", "el fútbol", sample_story)

        assert story_id is None
        assert "insert failed" in caplog.text

    @pytest.mark.asyncio
    async def test_without_store_is_noop(self, sample_story):
        assert await StoryLogService(None).log_story("a", "b", sample_story) is None


class TestGetStory:

    @pytest.mark.asyncio
    async def test_rehydrates_story(self, service, mock_repo, record, sample_story):
        mock_repo.get_story_log.return_value = record

        assert await service.get_story(STORY_ID) == sample_story

    @pytest.mark.asyncio
    async def test_missing_story_raises_not_found(self, service):
        with pytest.raises(StoryNotFound):
            await service.get_story(STORY_ID)

    @pytest.mark.asyncio
    async def test_store_error_raises_unavailable(self, service, mock_repo):
        mock_repo.get_story_log.side_effect = ConnectionError("db down")

        with pytest.raises(PersistenceUnavailable):
            await service.get_story(STORY_ID)

    @pytest.mark.asyncio
    async def test_without_store_raises_unavailable(self):
        with pytest.raises(PersistenceUnavailable):
            await StoryLogService(None).get_story(STORY_ID)

    @pytest.mark.asyncio
    async def test_corrupt_content_raises_not_found(self, service, mock_repo, record):
        mock_repo.get_story_log.return_value = record.model_copy(update={"story_content": "{}"})

        with pytest.raises(StoryNotFound):
            await service.get_story(STORY_ID)


class TestMarkListened:

    @pytest.mark.asyncio
    async def test_updates_flag(self, service, mock_repo):
        assert await service.mark_listened(STORY_ID) is True
        mock_repo.mark_listened.assert_awaited_once_with(STORY_ID)

    @pytest.mark.asyncio
    async def test_swallows_failure(self, service, mock_repo):
        mock_repo.mark_listened.side_effect = ConnectionError("db down")

        assert await service.mark_listened(STORY_ID) is False

    @pytest.mark.asyncio
    async def test_without_store(self):
        assert await StoryLogService(None).mark_listened(STORY_ID) is False


class TestGetOrCreateAudio:

    @pytest.mark.asyncio
    async def test_returns_cached_audio_without_synthesis(self, service, mock_repo, record):
        mock_repo.get_story_log.return_value = record.model_copy(update={"audio_data": "CACHED"})
        synthesize = AsyncMock()

        audio, cached = await service.get_or_create_audio(STORY_ID, synthesize)

        assert (audio, cached) == ("CACHED", True)
        synthesize.assert_not_awaited()
        mock_repo.update_audio.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_synthesizes_and_caches(self, service, mock_repo, record, sample_story):
        mock_repo.get_story_log.return_value = record
        synthesize = AsyncMock(return_value="FRESH")

        audio, cached = await service.get_or_create_audio(STORY_ID, synthesize)

        assert (audio, cached) == ("FRESH", False)
        synthesize.assert_awaited_once_with(sample_story.content)
        mock_repo.update_audio.assert_awaited_once_with(STORY_ID, "FRESH")

    @pytest.mark.asyncio
    async def test_cache_write_failure_still_returns_audio(self, service, mock_repo, record):
        mock_repo.get_story_log.return_value = record
        mock_repo.update_audio.side_effect = ConnectionError("db down")

        audio, cached = await service.get_or_create_audio(STORY_ID, AsyncMock(return_value="FRESH"))

        assert (audio, cached) == ("FRESH", False)

    @pytest.mark.asyncio
    async def test_empty_synthesis_raises(self, service, mock_repo, record):
        mock_repo.get_story_log.return_value = record

        with pytest.raises(NarrationFailed):
            await service.get_or_create_audio(STORY_ID, AsyncMock(return_value=None))

        mock_repo.update_audio.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_story_raises_before_synthesis(self, service):
        synthesize = AsyncMock()

        with pytest.raises(StoryNotFound):
            await service.get_or_create_audio(STORY_ID, synthesize)

        synthesize.assert_not_awaited()


class TestGetOrCreateShareMessage:

    @pytest.mark.asyncio
    async def test_returns_cached_message(self, service, mock_repo, record):
        mock_repo.get_story_log.return_value = record.model_copy(update={"share_message": "Ya compartido"})

        with patch("cuentos.api.services.story_log_service.craft_share_caption") as craft:
            message = await service.get_or_create_share_message(STORY_ID)

        assert message == "Ya compartido"
        craft.assert_not_called()

    @pytest.mark.asyncio
    async def test_crafts_and_caches(self, service, mock_repo, record, sample_story):
        mock_repo.get_story_log.return_value = record

        with patch(
            "cuentos.api.services.story_log_service.craft_share_caption",
            return_value="Aprendé sobre la fotosíntesis a través del fútbol",
        ) as craft:
            message = await service.get_or_create_share_message(STORY_ID)

        assert message == "Aprendé sobre la fotosíntesis a través del fútbol"
        craft.assert_called_once_with("la fotosíntesis", "el fútbol", sample_story.title)
        mock_repo.update_share_message.assert_awaited_once_with(STORY_ID, message)

    @pytest.mark.asyncio
    async def test_cache_write_failure_still_returns_message(self, service, mock_repo, record):
        mock_repo.get_story_log.return_value = record
        mock_repo.update_share_message.side_effect = ConnectionError("db down")

        with patch("cuentos.api.services.story_log_service.craft_share_caption", return_value="Hola"):
            assert await service.get_or_create_share_message(STORY_ID) == "Hola"


class TestCorruptStoredContent:
    """Every read maps an unreadable stored story to StoryNotFound."""

    @pytest.fixture
    def corrupt(self, mock_repo, record):
        mock_repo.get_story_log.return_value = record.model_copy(update={"story_content": "not json"})

    @pytest.mark.asyncio
    async def test_audio(self, service, mock_repo, corrupt):
        synthesize = AsyncMock()

        with pytest.raises(StoryNotFound):
            await service.get_or_create_audio(STORY_ID, synthesize)

        synthesize.assert_not_awaited()
        mock_repo.update_audio.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_share(self, service, mock_repo, corrupt):
        with patch("cuentos.api.services.story_log_service.craft_share_caption") as craft:
            with pytest.raises(StoryNotFound):
                await service.get_or_create_share_message(STORY_ID)

        craft.assert_not_called()
        mock_repo.update_share_message.assert_not_awaited()
