import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from .log import get_logger
from .models import StoreData, dump

logger = get_logger(__name__)


@dataclass(frozen=True)
class Loaded:
    data: StoreData


@dataclass(frozen=True)
class Corrupt:
    raw: bytes
    error: str


@dataclass(frozen=True)
class Missing:
    pass


LoadResult = Union[Loaded, Corrupt, Missing]


def _encode(data: StoreData) -> str:
    return json.dumps(dump(data), indent=2, ensure_ascii=False)


class JsonFileStore:
    """Whole-document JSON persistence. Writes are not atomic."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> LoadResult:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return Missing()
        try:
            data = json.loads(raw.decode("utf-8"))
            return Loaded(StoreData.model_validate(data))
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            return Corrupt(raw=raw, error=str(exc))

    def save(self, data: StoreData) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(_encode(data), encoding="utf-8")

    def create(self, data: StoreData) -> bool:
        """Write *data* only if no file exists yet. False when one already does."""
        text = _encode(data)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.path.open("x", encoding="utf-8") as f:
                f.write(text)
        except FileExistsError:
            return False
        return True

    def backup_corrupt(self, raw: bytes) -> Path:
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        target.write_bytes(raw)
        logger.warning("Copied unreadable store %s to %s", self.path, target)
        return target
