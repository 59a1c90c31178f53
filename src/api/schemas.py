"""Pydantic schemas for API contracts."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from client.podcaster.audio.types import AudioSegment


class SegmentPayload(BaseModel):
    """One synthesized line; accepts the web client's camelCase field names."""

    model_config = ConfigDict(populate_by_name=True)

    speaker_label: str = Field(default="", alias="speaker")
    text: str = ""
    sequence_index: int = Field(default=0, ge=0, alias="segmentIndex")
    encoded_audio: Optional[str] = Field(default=None, alias="audioBase64")
    synthesis_error: Optional[str] = Field(default=None, alias="error")
    estimated_duration_seconds: Optional[float] = Field(default=None, alias="duration")

    def to_segment(self) -> AudioSegment:
        return AudioSegment(
            speaker_label=self.speaker_label,
            text=self.text,
            sequence_index=self.sequence_index,
            encoded_audio=self.encoded_audio,
            synthesis_error=self.synthesis_error,
            estimated_duration_seconds=self.estimated_duration_seconds,
        )


class MergeRequest(BaseModel):
    segments: List[SegmentPayload] = Field(default_factory=list)


class MergeResponse(BaseModel):
    status: str
    degraded: bool
    audio_base64: Optional[str] = None
    content_type: Optional[str] = None
    total_segments: int
    usable_segments: int
    decoded_segments: int
    dropped_indices: List[int] = Field(default_factory=list)
    fallback_spans: List[Tuple[int, int]] = Field(default_factory=list)
    error: Optional[str] = None


class PodcastPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)
    title: str
    topic: str = ""
    personality1: str = ""
    personality2: str = ""
    script: str = ""


class SavePodcastRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    podcast: PodcastPayload = Field(alias="podcastData")
    audio_segments: List[SegmentPayload] = Field(default_factory=list, alias="audioSegments")


class SavePodcastResponse(BaseModel):
    podcast_id: str
    audio_url: Optional[str] = None
    degraded: bool = False
    warning: Optional[str] = None


class PodcastRecord(BaseModel):
    id: str
    user_id: str
    title: str
    topic: str = ""
    personality1: str = ""
    personality2: str = ""
    script: str = ""
    audio_url: Optional[str] = None
    audio_status: Optional[str] = None
    audio_spans: Optional[List[Tuple[int, int]]] = None
    created_at: float
    updated_at: float


class PodcastListResponse(BaseModel):
    count: int
    podcasts: List[PodcastRecord]


class DeleteResponse(BaseModel):
    status: str = "deleted"
    podcast_id: str


class HealthResponse(BaseModel):
    ok: bool
    timestamp: datetime
