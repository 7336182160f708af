import hashlib
import hmac
import logging
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from github import GithubException
from rich.console import Console

from pr_narrator.agents.summarizer import SummarizerAgent
from pr_narrator.config import Settings
from pr_narrator.events import EventError, parse_event
from pr_narrator.github import GitHubClient
from pr_narrator.github.app_auth import GitHubAppAuth
from pr_narrator.llm import LLMClient

logger = logging.getLogger(__name__)
console = Console()


@asynccontextmanager
async def lifespan(app: FastAPI):
    console.print("[green]Server started[/green]")
    yield
    console.print("[yellow]Server stopped[/yellow]")


app = FastAPI(lifespan=lifespan)


def verify_signature(payload: bytes, signature: str, secret: str) -> bool:
    if not secret:
        return True
    expected = "sha256=" + hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)


def get_app_auth(settings: Settings) -> GitHubAppAuth:
    return GitHubAppAuth(app_id=settings.github_app_id or "", private_key=settings.github_private_key or "")


@app.post("/webhook")
async def webhook(request: Request, background: BackgroundTasks):
    settings = Settings()
    payload = await request.body()
    signature = request.headers.get("X-Hub-Signature-256", "")

    if not verify_signature(payload, signature, settings.github_webhook_secret or ""):
        raise HTTPException(status_code=401, detail="Invalid signature")

    event_name = request.headers.get("X-GitHub-Event")
    data = await request.json()

    try:
        event = parse_event(event_name, data)
    except EventError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if event is None:
        return {"status": "ignored"}

    installation_id = (data.get("installation") or {}).get("id")
    background.add_task(handle_pr_summary, settings, event.full_name, event.number, installation_id)
    return {"status": "accepted"}


def handle_pr_summary(settings: Settings, repo_full_name: str, pr_number: int, installation_id: int | None):
    console.print(f"[blue]Summarizing PR #{pr_number} in {repo_full_name}[/blue]")

    agent_settings = settings.model_copy()
    app_auth = get_app_auth(settings)
    if installation_id is not None and app_auth.configured:
        agent_settings.github_token = app_auth.get_installation_token(installation_id)
    agent_settings.github_repository = repo_full_name

    if not agent_settings.github_token:
        logger.error(
            "Cannot summarize PR #%s in %s: no GitHub token (set GITHUB_TOKEN or configure the GitHub App)",
            pr_number,
            repo_full_name,
        )
        return

    github = GitHubClient(agent_settings.github_token, repo_full_name)
    try:
        agent = SummarizerAgent(agent_settings, github, LLMClient(agent_settings))
        agent.summarize(pr_number)
    except GithubException as e:
        logger.error("GitHub error while summarizing PR #%s in %s: %s", pr_number, repo_full_name, e)
    finally:
        github.close()


@app.get("/health")
async def health():
    return {"status": "healthy"}
