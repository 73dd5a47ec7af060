from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from leafrelay.models import DeviceAddress, SessionRecord

logger = logging.getLogger(__name__)

SESSION_FILE = "session.json"


class Database:
    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._session_path = data_dir / SESSION_FILE

    @property
    def path(self) -> Path:
        return self._data_dir

    @property
    def session_path(self) -> Path:
        return self._session_path

    def ensure_dirs(self) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)

    def init(self) -> bool:
        created = not self._data_dir.exists()
        self.ensure_dirs()
        return created

    def save_session(
        self,
        address: DeviceAddress | None,
        token: str | None,
        revoked: Iterable[str] = (),
    ) -> None:
        record = SessionRecord(
            host=address.host if address else None,
            port=address.port if address else None,
            token=token,
            revoked_tokens=list(revoked),
            updated_at=datetime.now(timezone.utc),
        )
        self.ensure_dirs()
        with self._session_path.open("w") as handle:
            json.dump(record.model_dump(mode="json"), handle, indent=2)
        self._session_path.chmod(0o600)
        logger.debug("Saved session to %s", self._session_path)

    def load_session(self) -> SessionRecord | None:
        if not self._session_path.exists():
            return None

        try:
            with self._session_path.open("r") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(
                f"Invalid JSON in session file: {self._session_path}\n{exc}"
            ) from exc

        try:
            return SessionRecord.model_validate(data)
        except ValidationError as exc:
            raise ValueError(
                f"Invalid session file: {self._session_path}\n{exc}"
            ) from exc

    def clear_session(self) -> bool:
        if self._session_path.exists():
            self._session_path.unlink()
            return True
        return False
