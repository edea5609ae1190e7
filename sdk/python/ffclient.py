from typing import Iterable, List, Optional

import requests


class FFClient:
    """HTTP client for the rollout service. Every call asks the service; nothing is cached."""

    def __init__(self, api_url: str, timeout: float = 2.0):
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout

    def _get(self, path: str, params=None):
        url = f"{self.api_url}{path}"
        r = requests.get(url, params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def _post(self, path: str, payload: dict):
        url = f"{self.api_url}{path}"
        r = requests.post(url, json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def is_active(self, name: str) -> bool:
        data = self._get(f"/evaluate/{name}")
        return data["enabled"]

    def is_team_active(self, name: str, team_id: int) -> bool:
        data = self._get(f"/evaluate/{name}", params={"team_id": team_id})
        return data["enabled"]

    def is_team_active_multi(self, team_id: Optional[int], names: Iterable[str]) -> List[bool]:
        data = self._post("/evaluate", {"team_id": team_id, "features": list(names)})
        return [r["enabled"] for r in data["results"]]
