import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LegacyCache:
    """Key/value store left behind by the browser-only version of the app.

    The browser kept its data in ``localStorage``; those entries were dumped
    into one JSON object on disk, e.g.::

        {"dairyRecords": [...], "dairyCustomers": ["Ram", "Sita"]}
    """

    def __init__(self, path):
        self.path = Path(path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read legacy cache {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Legacy cache {self.path} is not a JSON object, ignoring it")
            return {}
        return data

    def get_item(self, key: str):
        value = self._load().get(key)
        # localStorage only held strings, so values may still be JSON-encoded
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return value

    def remove_item(self, key: str):
        data = self._load()
        if key not in data:
            return
        del data[key]
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
