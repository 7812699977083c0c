from abc import ABC, abstractmethod

class BaseAdapter(ABC):
    """Turns rows from the hosted backend (dicts) into ORM objects."""

    @abstractmethod
    def run(self, data):
        pass

    def _json_get(self, json, key, default=None):
        "Safe json get, null counts as missing"
        if key not in json or json[key] is None:
            return default
        return json[key]

    def _row_ids(self, json):
        "(game_id, player_id) of a child row as strings"
        return str(self._json_get(json, "game_id", "")), str(self._json_get(json, "player_id", ""))
