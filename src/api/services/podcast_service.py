"""Save-podcast workflow: store metadata, merge segment audio, attach it."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

from client.podcaster.audio.decoder import Decoder, decode_base64
from client.podcaster.audio.merger import AudioMerger
from client.podcaster.audio.types import AudioSegment, DecodeError, MergeResult, MergeStatus
from client.podcaster.config import CONFIG, MergeConfig

from ..metrics import MERGE_COUNTER, MERGE_DURATION, SEGMENT_DECODE_FAILURES
from ..schemas import PodcastPayload
from ..settings import APISettings
from .podcast_store import get_store

LOGGER = logging.getLogger("podcaster.api")

NO_AUDIO_WARNING = "Podcast created but no audio could be produced"
DEGRADED_WARNING = (
    "Podcast created but segment audio could not be merged; "
    "the raw segment data was stored for recovery and is not playable"
)


class PodcastService:
    def __init__(self, settings: APISettings, decoder: Decoder | None = None) -> None:
        self.settings = settings
        self.store = get_store(settings.podcast_store_path, settings.audio_dir)
        config = MergeConfig(
            decode_workers=settings.merge_decode_workers,
            resample=settings.merge_resample,
            resample_filter=CONFIG.resample_filter,
        )
        self.merger = AudioMerger(decoder, config)

    def merge(self, segments: Sequence[AudioSegment]) -> MergeResult:
        start = time.perf_counter()
        result = self.merger.merge(segments)
        MERGE_DURATION.observe(time.perf_counter() - start)
        MERGE_COUNTER.labels(status=result.status.value).inc()
        if result.dropped_indices:
            SEGMENT_DECODE_FAILURES.inc(len(result.dropped_indices))
        return result

    def save(self, podcast: PodcastPayload, segments: Sequence[AudioSegment]) -> Dict[str, Any]:
        row = self.store.create(podcast.model_dump())
        LOGGER.info("Podcast %s created for user %s", row["id"], podcast.user_id)
        response: Dict[str, Any] = {
            "podcast_id": row["id"],
            "audio_url": None,
            "degraded": False,
            "warning": None,
        }
        if not segments:
            return response

        result = self.merge(segments)
        data = self._audio_bytes(result)
        if data is None:
            response["warning"] = NO_AUDIO_WARNING
            return response

        filename = self.store.write_audio(row["id"], data, result.content_type or "")
        audio_url = f"{self.settings.public_audio_base_url.rstrip('/')}/{filename}"
        changes: Dict[str, Any] = {"audio_url": audio_url, "audio_status": result.status.value}
        if result.degraded:
            changes["audio_spans"] = [list(span) for span in result.fallback_spans]
            response["degraded"] = True
            response["warning"] = DEGRADED_WARNING
        self.store.update(row["id"], **changes)
        response["audio_url"] = audio_url
        return response

    def list_podcasts(self, user_id: str) -> List[Dict[str, Any]]:
        return self.store.list_for_user(user_id)

    def get_podcast(self, podcast_id: str) -> Dict[str, Any]:
        return self.store.get(podcast_id)

    def delete_podcast(self, podcast_id: str, user_id: str) -> None:
        self.store.delete(podcast_id, user_id)
        LOGGER.info("Podcast %s deleted for user %s", podcast_id, user_id)

    def _audio_bytes(self, result: MergeResult) -> Optional[bytes]:
        if result.status is MergeStatus.MERGED and result.payload is not None:
            return result.payload.container_bytes
        if result.status is MergeStatus.SINGLE and result.audio_base64:
            try:
                return decode_base64(result.audio_base64)
            except DecodeError as exc:
                LOGGER.error("Single segment audio is not valid base64: %s", exc)
                return None
        if result.status is MergeStatus.FALLBACK and result.audio_base64:
            # Base64 pieces are kept verbatim; the spans split them apart again.
            return result.audio_base64.encode("utf-8")
        return None
