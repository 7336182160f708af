from rich.console import Console

from pr_narrator.config import Settings
from pr_narrator.digest import DigestPipeline
from pr_narrator.github import GitHubClient
from pr_narrator.llm import TextGenerator
from pr_narrator.llm.prompts import EVIDENCE_STAGE, NARRATIVE_STAGE, get_prompt

console = Console()


class SummarizerAgent:
    def __init__(self, settings: Settings, github: GitHubClient, llm: TextGenerator):
        self.settings = settings
        self.github = github
        self.pipeline = DigestPipeline(
            llm,
            exclude_patterns=settings.exclude_patterns,
            evidence_prompt=get_prompt(EVIDENCE_STAGE, settings.evidence_prompt_version),
            narrative_prompt=get_prompt(NARRATIVE_STAGE, settings.narrative_prompt_version),
        )

    def summarize(self, pr_number: int, publish: bool = True) -> str | None:
        """Summarize a PR and post the comment. Returns the markdown, or None if there was nothing to post."""

        # 1. PR metadata and commits
        console.print(f"[blue]Reading PR #{pr_number}...[/blue]")
        context = self.github.get_pr_context(pr_number)

        # 2. Diff
        console.print("[blue]Fetching diff...[/blue]")
        diff = self.github.get_pr_diff(pr_number)
        if not diff:
            console.print("[yellow]No diff found[/yellow]")
            return None

        # 3. Evidence + narrative
        console.print("[blue]Summarizing changes...[/blue]")
        report = self.pipeline.run(context, diff)
        if report is None:
            console.print("[yellow]No summary produced, nothing to publish[/yellow]")
            return None

        body = report.to_markdown()
        if not publish:
            return body

        # 4. Publish
        author = context.author if self.settings.attribution == "author" else None
        console.print("[blue]Publishing summary...[/blue]")
        self.github.add_comment(pr_number, body, author=author)
        console.print("[green]Summary published![/green]")
        return body
