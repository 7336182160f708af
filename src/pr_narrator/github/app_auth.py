import time

import httpx
import jwt

API_URL = "https://api.github.com"

# GitHub rejects app JWTs living longer than 10 minutes
JWT_TTL_SECONDS = 540


class GitHubAppAuth:
    """Mint installation tokens for webhook deliveries."""

    def __init__(self, app_id: str, private_key: str):
        self.app_id = app_id
        self.private_key = private_key.replace("\\n", "\n")

    @property
    def configured(self) -> bool:
        return bool(self.app_id and self.private_key)

    def get_jwt(self) -> str:
        issued_at = int(time.time()) - 60
        claims = {"iat": issued_at, "exp": issued_at + JWT_TTL_SECONDS, "iss": self.app_id}
        return jwt.encode(claims, self.private_key, algorithm="RS256")

    def get_installation_token(self, installation_id: int) -> str:
        resp = httpx.post(
            f"{API_URL}/app/installations/{installation_id}/access_tokens",
            headers={
                "Authorization": f"Bearer {self.get_jwt()}",
                "Accept": "application/vnd.github+json",
            },
        )
        resp.raise_for_status()
        return resp.json()["token"]
