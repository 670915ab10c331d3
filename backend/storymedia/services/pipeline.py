"""Media generation pipeline — the per-attempt processing routine.

Each attempt:
1. Loads the story (missing → StoryNotFoundError, not retried)
2. Opens a cost record (processing, provider "unknown", cost 0)
3. Marks the story slot processing
4. Resolves the provider and generates
5. Success: closes the cost record as completed, stores the asset reference
6. Failure: best-effort closes the cost record as failed, marks the slot
   failed, re-raises so the broker's retry policy applies

Slot writes are fenced on the job's generation: once a newer job has been
admitted for the same story and media type, this job's writes are skipped.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storymedia.errors import InvalidMediaTypeError, StoryNotFoundError
from storymedia.models.media import MediaStatus, MediaType
from storymedia.models.media_cost import CostStatus, MediaGenerationCost
from storymedia.models.story import Story, slot_columns
from storymedia.services.providers.base import GenerationParams
from storymedia.services.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


@dataclass
class MediaJob:
    """Broker payload for one logical media generation request."""

    story_id: str
    media_type: str
    content: str
    title: str
    theme: str | None = None
    generation: int = 0

    def __post_init__(self) -> None:
        try:
            self.media_type = MediaType(self.media_type).value
        except ValueError:
            raise InvalidMediaTypeError(str(self.media_type)) from None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MediaJob":
        return cls(
            story_id=data["story_id"],
            media_type=data["media_type"],
            content=data.get("content", ""),
            title=data.get("title", ""),
            theme=data.get("theme"),
            generation=int(data.get("generation", 0)),
        )


async def set_media_slot(
    session: AsyncSession,
    story_id: str,
    media_type: MediaType | str,
    status: MediaStatus,
    url: str | None = None,
    generation: int | None = None,
) -> bool:
    """Write a story's media slot; returns False when the write was fenced off.

    With ``generation`` given, the write only applies while that generation is
    still the story's current one for the media type.
    """
    status_col, url_col, gen_col = slot_columns(media_type)
    stmt = update(Story).where(Story.id == story_id)
    if generation is not None:
        stmt = stmt.where(getattr(Story, gen_col) == generation)
    result = await session.execute(stmt.values({status_col: status.value, url_col: url}))
    return result.rowcount > 0


class MediaPipeline:
    """Runs the processing routine against a session factory and registry."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        registry: ProviderRegistry,
    ) -> None:
        self.session_factory = session_factory
        self.registry = registry

    async def process(self, job: MediaJob) -> dict[str, Any]:
        media_type = MediaType(job.media_type)

        story = await self._load_story(job.story_id)
        if story is None:
            logger.error("Story %s not found, dropping %s job", job.story_id, media_type.value)
            raise StoryNotFoundError(job.story_id)

        cost_record_id = await self._open_cost_record(story.user_id, job.story_id, media_type)

        try:
            await self._write_slot(job, MediaStatus.PROCESSING)
            provider = self.registry.get_provider(media_type)
            logger.info(
                "Starting %s generation for story %s via %s",
                media_type.value, job.story_id, provider.name,
            )
            result = await provider.generate(GenerationParams(
                story_id=job.story_id,
                content=job.content,
                title=job.title,
                theme=job.theme,
            ))

            async with self.session_factory() as session:
                await session.execute(
                    update(MediaGenerationCost)
                    .where(MediaGenerationCost.id == cost_record_id)
                    .values(
                        provider=provider.name,
                        cost=result.cost or 0.0,
                        status=CostStatus.COMPLETED.value,
                    )
                )
                applied = await set_media_slot(
                    session, job.story_id, media_type, MediaStatus.COMPLETED,
                    url=result.asset_ref, generation=job.generation,
                )
                await session.commit()
        except Exception as exc:
            logger.error(
                "Failed to generate %s for story %s: %s", media_type.value, job.story_id, exc,
            )
            await self._fail_cost_record(cost_record_id)
            await self._write_slot(job, MediaStatus.FAILED)
            raise

        if not applied:
            logger.info(
                "Story %s %s superseded by a newer generation; result %s not stored",
                job.story_id, media_type.value, result.asset_ref,
            )
        logger.info(
            "Successfully generated %s for story %s, cost: $%.4f",
            media_type.value, job.story_id, result.cost or 0.0,
        )
        return {
            "story_id": job.story_id,
            "media_type": media_type.value,
            "status": MediaStatus.COMPLETED.value,
            "asset_ref": result.asset_ref,
            "provider": provider.name,
            "cost": result.cost or 0.0,
            "superseded": not applied,
        }

    async def _load_story(self, story_id: str) -> Story | None:
        async with self.session_factory() as session:
            result = await session.execute(select(Story).where(Story.id == story_id))
            return result.scalar_one_or_none()

    async def _open_cost_record(self, user_id: str, story_id: str, media_type: MediaType) -> str:
        async with self.session_factory() as session:
            record = MediaGenerationCost(
                user_id=user_id,
                story_id=story_id,
                media_type=media_type.value,
                provider="unknown",
                cost=0.0,
                status=CostStatus.PROCESSING.value,
            )
            session.add(record)
            await session.commit()
            return record.id

    async def _fail_cost_record(self, cost_record_id: str) -> None:
        """Mark the attempt failed; errors here are logged, never raised."""
        try:
            async with self.session_factory() as session:
                await session.execute(
                    update(MediaGenerationCost)
                    .where(MediaGenerationCost.id == cost_record_id)
                    .values(status=CostStatus.FAILED.value)
                )
                await session.commit()
        except Exception as err:
            logger.error("Failed to update cost record %s status: %s", cost_record_id, err)

    async def _write_slot(self, job: MediaJob, status: MediaStatus) -> None:
        async with self.session_factory() as session:
            applied = await set_media_slot(
                session, job.story_id, job.media_type, status, generation=job.generation,
            )
            await session.commit()
        if not applied:
            logger.info(
                "Skipped %s %s write for story %s: generation %d superseded",
                job.media_type, status.value, job.story_id, job.generation,
            )
