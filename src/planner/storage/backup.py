from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from ..domain.models import Event

BACKUP_PREFIX = "events_"


def write_backup(events: Sequence[Event], output_dir: Path, *, now: datetime | None = None) -> Path:
    """Write the collection as a JSON array next to older exports and return its path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    reference = now or datetime.now(timezone.utc)
    backup_name = f"{BACKUP_PREFIX}{reference:%Y%m%d_%H%M%S_%f}.json"
    tmp_path = output_dir / f"{backup_name}.tmp"
    final_path = output_dir / backup_name

    payload = [event.model_dump(mode="json") for event in events]
    tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    os.replace(tmp_path, final_path)
    return final_path


def list_backups(output_dir: Path) -> list[Path]:
    if not output_dir.is_dir():
        return []
    return sorted(
        path for path in output_dir.glob(f"{BACKUP_PREFIX}*.json") if path.is_file()
    )


def prune_backups(output_dir: Path, keep: int) -> int:
    if keep <= 0:
        return 0

    to_delete = list_backups(output_dir)[:-keep]
    for path in to_delete:
        path.unlink()
    return len(to_delete)
