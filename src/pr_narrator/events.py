import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SUPPORTED_EVENTS = {"pull_request", "pull_request_target"}
SUPPORTED_ACTIONS = {"opened", "synchronize"}


class EventError(Exception):
    """The triggering event cannot be resolved. Fatal for the run."""


@dataclass(frozen=True)
class PullRequestEvent:
    owner: str
    repo: str
    number: int
    action: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def is_supported(event_name: str | None, action: str | None) -> bool:
    return event_name in SUPPORTED_EVENTS and action in SUPPORTED_ACTIONS


def parse_event(event_name: str | None, payload: dict) -> PullRequestEvent | None:
    """Resolve a PR event from a webhook/Actions payload.

    Returns None for events this tool does not handle.
    """
    action = payload.get("action")
    if not is_supported(event_name, action):
        logger.info("Unsupported event: %s (action=%s)", event_name, action)
        return None

    try:
        repository = payload["repository"]
        owner = repository["owner"]["login"]
        repo = repository["name"]
        number = int(payload.get("number") or payload["pull_request"]["number"])
    except (KeyError, TypeError, ValueError) as e:
        raise EventError(f"Event payload has no pull request coordinates: missing {e}") from e

    return PullRequestEvent(owner=owner, repo=repo, number=number, action=action)


def load_event(event_name: str | None, event_path: str | Path | None) -> PullRequestEvent | None:
    if not event_path:
        raise EventError("GITHUB_EVENT_PATH is not set")

    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except OSError as e:
        raise EventError(f"Cannot read event file {event_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise EventError(f"Event file {event_path} is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise EventError(f"Event file {event_path} does not contain an object")

    return parse_event(event_name, payload)
