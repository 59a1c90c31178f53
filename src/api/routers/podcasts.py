"""Podcast save/list/delete and stand-alone merge endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse

from ..schemas import (
    DeleteResponse,
    MergeRequest,
    MergeResponse,
    PodcastListResponse,
    PodcastRecord,
    SavePodcastRequest,
    SavePodcastResponse,
)
from ..services.podcast_service import PodcastService
from ..services.podcast_store import PodcastNotFound
from ..settings import APISettings, get_settings

router = APIRouter(tags=["podcasts"])


def get_service(settings: APISettings = Depends(get_settings)) -> PodcastService:
    return PodcastService(settings)


@router.post("/v1/audio/merge", response_model=MergeResponse)
async def merge_audio(
    payload: MergeRequest,
    service: PodcastService = Depends(get_service),
):
    result = service.merge([segment.to_segment() for segment in payload.segments])
    return MergeResponse(
        status=result.status.value,
        degraded=result.degraded,
        audio_base64=result.audio_base64,
        content_type=result.content_type,
        total_segments=result.total_segments,
        usable_segments=result.usable_segments,
        decoded_segments=result.decoded_segments,
        dropped_indices=result.dropped_indices,
        fallback_spans=result.fallback_spans,
        error=result.error,
    )


@router.post("/v1/podcasts", response_model=SavePodcastResponse)
async def save_podcast(
    payload: SavePodcastRequest,
    service: PodcastService = Depends(get_service),
):
    record = service.save(
        payload.podcast, [segment.to_segment() for segment in payload.audio_segments]
    )
    return SavePodcastResponse(**record)


@router.get("/v1/podcasts", response_model=PodcastListResponse)
async def list_podcasts(
    user_id: str | None = Query(None, alias="userId"),
    service: PodcastService = Depends(get_service),
):
    if not user_id:
        raise HTTPException(status_code=400, detail="userId is required")
    rows = service.list_podcasts(user_id)
    return PodcastListResponse(count=len(rows), podcasts=[PodcastRecord(**row) for row in rows])


@router.get("/v1/podcasts/{podcast_id}", response_model=PodcastRecord)
async def get_podcast(podcast_id: str, service: PodcastService = Depends(get_service)):
    try:
        return PodcastRecord(**service.get_podcast(podcast_id))
    except PodcastNotFound:
        raise HTTPException(status_code=404, detail="Podcast not found")


@router.delete("/v1/podcasts/{podcast_id}", response_model=DeleteResponse)
async def delete_podcast(
    podcast_id: str,
    user_id: str | None = Query(None, alias="userId"),
    service: PodcastService = Depends(get_service),
):
    if not user_id:
        raise HTTPException(status_code=400, detail="userId is required")
    try:
        service.delete_podcast(podcast_id, user_id)
    except PodcastNotFound:
        raise HTTPException(status_code=404, detail="Podcast not found or access denied")
    return DeleteResponse(podcast_id=podcast_id)


@router.get("/audio/{filename}")
async def get_audio(filename: str, service: PodcastService = Depends(get_service)):
    path = service.store.audio_path(filename)
    if path is None:
        raise HTTPException(status_code=404, detail="Audio not found")
    return FileResponse(path)
