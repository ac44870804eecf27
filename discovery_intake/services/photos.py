# discovery_intake/services/photos.py
from __future__ import annotations

import base64
import binascii
import contextvars
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from discovery_intake.core.errors import AttachmentError
from discovery_intake.core.settings import Settings
from discovery_intake.services.hubspot_client import HubSpotClient

logger = structlog.get_logger(__name__)


@dataclass
class PhotoAttachmentResult:
    file_ids: List[str] = field(default_factory=list)
    failed: int = 0
    skipped: int = 0
    note_created: bool = False


def decode_data_url(photo: str) -> bytes:
    """'data:image/jpeg;base64,/9j/...' -> bytes. Zonder prefix: hele string is base64."""
    if not isinstance(photo, str) or not photo.strip():
        raise AttachmentError("empty photo payload")
    _, sep, payload = photo.partition(",")
    if not sep:
        payload = photo
    try:
        content = base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise AttachmentError(f"invalid base64 photo payload: {e}") from e
    if not content:
        raise AttachmentError("empty photo payload")
    return content


def photo_filename(prefix: str, index: int, timestamp_ms: Optional[int] = None) -> str:
    ts = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    return f"{prefix}-{ts}-{index}.jpg"


class PhotoUploader:
    """Upload foto's naar HubSpot en hang ze via één note aan het contact."""

    def __init__(self, client: HubSpotClient, settings: Settings):
        self.client = client
        self.settings = settings

    def _upload_one(self, index: int, photo: str) -> Optional[str]:
        filename = photo_filename(self.settings.PHOTO_FILENAME_PREFIX, index)
        try:
            content = decode_data_url(photo)
            return self.client.upload_file(content, filename)
        except AttachmentError as e:
            logger.error("photo_decode_failed", index=index, filename=filename, error=str(e))
        except Exception:
            logger.exception("photo_upload_crashed", index=index, filename=filename)
        return None

    def upload_all(self, photos: List[str]) -> PhotoAttachmentResult:
        result = PhotoAttachmentResult()
        limit = self.settings.MAX_PHOTOS
        if len(photos) > limit:
            result.skipped = len(photos) - limit
            logger.warning("photos_over_limit", received=len(photos), limit=limit)
            photos = photos[:limit]

        workers = min(self.settings.PHOTO_UPLOAD_CONCURRENCY, len(photos)) or 1
        if workers == 1:
            outcomes = [self._upload_one(i, p) for i, p in enumerate(photos)]
        else:
            # map() houdt de volgorde van de submission aan; elke taak krijgt een
            # eigen kopie van de contextvars (request_id in de logs)
            contexts = [contextvars.copy_context() for _ in photos]
            with ThreadPoolExecutor(max_workers=workers) as pool:
                outcomes = list(
                    pool.map(
                        lambda ctx, i, p: ctx.run(self._upload_one, i, p),
                        contexts,
                        range(len(photos)),
                        photos,
                    )
                )

        for i, file_id in enumerate(outcomes):
            if file_id:
                result.file_ids.append(file_id)
            else:
                result.failed += 1
                logger.error("photo_upload_failed", index=i + 1, total=len(photos))
        return result

    def attach(self, contact_id: str, photos: List[str]) -> PhotoAttachmentResult:
        if not contact_id or not photos:
            logger.info("no_photos_to_process", contact_id=contact_id)
            return PhotoAttachmentResult()

        logger.info("processing_photos", contact_id=contact_id, count=len(photos))
        result = self.upload_all(photos)

        if result.file_ids:
            result.note_created = self.client.create_note(contact_id, result.file_ids)
        return result
