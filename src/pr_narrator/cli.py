import logging
import os

import typer
from github import GithubException
from rich.console import Console
from rich.logging import RichHandler

from pr_narrator.agents import SummarizerAgent
from pr_narrator.config import Settings, get_settings
from pr_narrator.events import EventError, load_event
from pr_narrator.github import GitHubClient
from pr_narrator.llm import LLMClient

app = typer.Typer(
    name="pr-narrator",
    help="Summarize GitHub pull requests into a narrative comment",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def apply_overrides(
    settings: Settings,
    repo: str | None,
    token: str | None,
    exclude: str | None,
    attribution: str | None,
) -> Settings:
    if repo:
        settings.github_repository = repo
    if token:
        settings.github_token = token
    if exclude is not None:
        settings.exclude = exclude
    if attribution:
        if attribution not in ("bot", "author"):
            raise typer.BadParameter("must be 'bot' or 'author'", param_hint="--attribution")
        settings.attribution = attribution

    if not settings.github_token:
        console.print("[red]GitHub token is not set (GITHUB_TOKEN or --token)[/red]")
        raise typer.Exit(1)
    if not settings.github_repository:
        console.print("[red]Repository is not set (GITHUB_REPOSITORY or --repo)[/red]")
        raise typer.Exit(1)
    return settings


def run_summary(settings: Settings, pr: int, dry_run: bool) -> None:
    github = None
    try:
        github = GitHubClient(settings.github_token, settings.github_repository)
        agent = SummarizerAgent(settings, github, LLMClient(settings))
        body = agent.summarize(pr, publish=not dry_run)
    except GithubException as e:
        if e.status == 404:
            console.print(f"[red]PR #{pr} not found in {settings.github_repository}[/red]")
        else:
            message = e.data.get("message", str(e)) if isinstance(e.data, dict) else str(e)
            console.print(f"[red]GitHub error: {message}[/red]")
        raise typer.Exit(1)
    finally:
        if github is not None:
            github.close()

    if dry_run and body:
        console.print(body, markup=False)


@app.command()
def summarize(
    pr: int = typer.Option(..., "--pr", "-p", help="PR number"),
    repo: str | None = typer.Option(None, "--repo", "-r", help="Repository (owner/repo)"),
    token: str | None = typer.Option(None, "--token", "-t", help="GitHub token"),
    exclude: str | None = typer.Option(None, "--exclude", "-e", help="Comma-separated globs to leave out"),
    attribution: str | None = typer.Option(None, "--attribution", "-a", help="bot or author"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the summary instead of commenting"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Summarize a PR and post the narrative as a comment."""
    setup_logging(verbose)
    settings = apply_overrides(get_settings(), repo, token, exclude, attribution)
    run_summary(settings, pr, dry_run)


@app.command()
def action(
    exclude: str | None = typer.Option(None, "--exclude", "-e", help="Comma-separated globs to leave out"),
    attribution: str | None = typer.Option(None, "--attribution", "-a", help="bot or author"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the summary instead of commenting"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Run inside GitHub Actions, driven by GITHUB_EVENT_NAME / GITHUB_EVENT_PATH."""
    setup_logging(verbose)
    try:
        event = load_event(os.getenv("GITHUB_EVENT_NAME"), os.getenv("GITHUB_EVENT_PATH"))
    except EventError as e:
        console.print(f"[red]Action failed: {e}[/red]")
        raise typer.Exit(1)

    if event is None:
        console.print("[dim]Nothing to do for this event[/dim]")
        return

    console.print(f"[blue]Analyzing PR #{event.number} in {event.full_name}[/blue]")
    settings = apply_overrides(get_settings(), event.full_name, None, exclude, attribution)
    run_summary(settings, event.number, dry_run)


if __name__ == "__main__":
    app()
