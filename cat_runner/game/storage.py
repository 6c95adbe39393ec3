# cat_runner/game/storage.py
"""Best-score persistence: a single non-negative integer under a fixed key."""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from .config import BEST_SCORE_KEY, SCORES_FILE_DEFAULT

logger = logging.getLogger(__name__)


class BestScoreStore(Protocol):
    def load_best_score(self) -> int:
        ...

    def store_best_score(self, score: int) -> None:
        ...


def _coerce_score(raw) -> int:
    """Anything that isn't a non-negative integer reads back as 0."""
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        return 0
    return value if value >= 0 else 0


class MemoryBestScoreStore:
    """In-process store (headless runs, tests)."""

    def __init__(self, initial: int = 0):
        self.value = _coerce_score(initial)
        self.writes = 0

    def load_best_score(self) -> int:
        return self.value

    def store_best_score(self, score: int) -> None:
        self.value = _coerce_score(score)
        self.writes += 1


class JsonBestScoreStore:
    """
    JSON file holding {key: best}. Other keys in the file are left alone.
    Read and write failures never reach the caller: reads fall back to 0,
    writes are logged.
    """

    def __init__(self, path: Union[str, Path, None] = None, key: str = BEST_SCORE_KEY):
        self.path = Path(path if path is not None else SCORES_FILE_DEFAULT).expanduser()
        self.key = key

    def _read(self) -> Optional[dict]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Could not read best score from %s: %s", self.path, e)
            return None
        return data if isinstance(data, dict) else None

    def load_best_score(self) -> int:
        data = self._read()
        if data is None:
            return 0
        return _coerce_score(data.get(self.key, 0))

    def store_best_score(self, score: int) -> None:
        data = self._read() or {}
        data[self.key] = _coerce_score(score)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not store best score to %s: %s", self.path, e)
