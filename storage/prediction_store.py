"""Prediction persistence: one active recommendation per match."""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from core.models import Recommendation

logger = logging.getLogger(__name__)

class JsonPredictionStore:
    """
    File-backed store keyed by match id.

    Saving a recommendation for a match that already has one replaces it;
    no history is kept.
    """

    def __init__(self, path):
        self.path = Path(path)

    def _load(self) -> Dict[str, dict]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _save(self, data: Dict[str, dict]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def upsert(self, recommendation: Recommendation):
        data = self._load()
        key = str(recommendation.match_id)
        row = recommendation.to_dict()
        row["is_active"] = True
        row["updated_at"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        if key in data:
            row["created_at"] = data[key].get("created_at", row["updated_at"])
            logger.debug(f"Superseding prediction for match {key}")
        else:
            row["created_at"] = row["updated_at"]
        data[key] = row
        self._save(data)

    def get(self, match_id) -> Optional[dict]:
        return self._load().get(str(match_id))

    def list_active(self) -> List[dict]:
        rows = [row for row in self._load().values() if row.get("is_active")]
        return sorted(rows, key=lambda r: r["confidence_score"], reverse=True)
