"""Best-score persistence for the host shell. The engine never touches this."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class HighScoreStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.best = self.load()

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return max(0, int(data["high_score"]))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable high score file %s: %s", self.path, e)
            return 0

    def submit(self, score: int) -> bool:
        """Record ``score``; True only when it beats the stored best."""
        if score <= self.best:
            return False
        self.best = score
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"high_score": score}), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save high score to %s: %s", self.path, e)
        else:
            logger.info("New high score %d saved to %s", score, self.path)
        return True
