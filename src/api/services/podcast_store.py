"""File-backed podcast rows plus their audio blobs."""

from __future__ import annotations

import json
import threading
import time
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

AUDIO_EXTENSIONS = {
    "audio/wav": ".wav",
    "audio/mpeg": ".mp3",
    "application/octet-stream": ".bin",
}


class PodcastNotFound(KeyError):
    """No podcast with that id belongs to the requesting user."""


class PodcastStore:
    """Keep podcast metadata in one JSON file and audio next to it."""

    def __init__(self, path: Path, audio_dir: Path) -> None:
        self.path = Path(path)
        self.audio_dir = Path(audio_dir)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.audio_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        now = time.time()
        row = {
            **fields,
            "id": uuid.uuid4().hex,
            "audio_url": None,
            "audio_status": None,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            rows = self._load()
            rows.append(row)
            self._persist(rows)
        return dict(row)

    def update(self, podcast_id: str, **changes: Any) -> Dict[str, Any]:
        with self._lock:
            rows = self._load()
            for row in rows:
                if row["id"] == podcast_id:
                    row.update(changes)
                    row["updated_at"] = time.time()
                    self._persist(rows)
                    return dict(row)
        raise PodcastNotFound(podcast_id)

    def get(self, podcast_id: str) -> Dict[str, Any]:
        for row in self._load():
            if row["id"] == podcast_id:
                return row
        raise PodcastNotFound(podcast_id)

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        rows = [row for row in self._load() if row.get("user_id") == user_id]
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        return rows

    def delete(self, podcast_id: str, user_id: str) -> None:
        with self._lock:
            rows = self._load()
            remaining = [
                row
                for row in rows
                if not (row["id"] == podcast_id and row.get("user_id") == user_id)
            ]
            if len(remaining) == len(rows):
                raise PodcastNotFound(podcast_id)
            self._persist(remaining)
        for audio_path in self.audio_dir.glob(f"{podcast_id}.*"):
            audio_path.unlink(missing_ok=True)

    def write_audio(self, podcast_id: str, data: bytes, content_type: str) -> str:
        """Store the blob and return its file name."""
        filename = f"{podcast_id}{AUDIO_EXTENSIONS.get(content_type, '.bin')}"
        (self.audio_dir / filename).write_bytes(data)
        return filename

    def audio_path(self, filename: str) -> Optional[Path]:
        path = self.audio_dir / Path(filename).name
        return path if path.is_file() else None

    def _load(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            return []

    def _persist(self, rows: List[Dict[str, Any]]) -> None:
        self.path.write_text(json.dumps(rows, ensure_ascii=False), encoding="utf-8")


@lru_cache(maxsize=None)
def get_store(path: str, audio_dir: str) -> PodcastStore:
    """One store (and one lock) per row file for the life of the process."""
    return PodcastStore(Path(path), Path(audio_dir))
