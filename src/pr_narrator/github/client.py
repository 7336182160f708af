import logging
from concurrent.futures import ThreadPoolExecutor

import httpx
from github import Auth, Github
from github.PullRequest import PullRequest
from github.Repository import Repository

from pr_narrator.github.models import CommitInfo, PullRequestContext

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com"


def attribute_to_author(body: str, author: str) -> str:
    """Mark a comment as posted on behalf of the PR author."""
    return f"_Summary posted on behalf of @{author}_\n\n{body}"


class GitHubClient:
    def __init__(self, token: str, repo_name: str):
        self.github = Github(auth=Auth.Token(token))
        self.repo: Repository = self.github.get_repo(repo_name)
        self.owner, self.repo_name = repo_name.split("/", 1)
        self.http = httpx.Client(
            base_url=API_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
            },
        )

    def get_pr(self, number: int) -> PullRequest:
        return self.repo.get_pull(number)

    def get_pr_context(self, number: int) -> PullRequestContext:
        """PR metadata and commit list, fetched concurrently."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            pr_future = pool.submit(self.get_pr, number)
            commits_future = pool.submit(self.list_commits, number)
            pr = pr_future.result()
            commits = commits_future.result()

        return PullRequestContext(
            owner=self.owner,
            repo=self.repo_name,
            number=number,
            title=pr.title or "",
            description=pr.body or "",
            author=pr.user.login if pr.user else "",
            commits=tuple(commits),
        )

    def list_commits(self, number: int) -> list[CommitInfo]:
        pr = self.get_pr(number)
        return [CommitInfo(sha=c.sha, message=c.commit.message) for c in pr.get_commits()]

    def get_pr_diff(self, number: int) -> str | None:
        """Raw unified diff of the PR, or None if GitHub refused to give it."""
        try:
            resp = self.http.get(
                f"/repos/{self.owner}/{self.repo_name}/pulls/{number}",
                headers={"Accept": "application/vnd.github.v3.diff"},
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Error getting diff for PR #%s: %s", number, e)
            return None
        return resp.text

    def add_comment(self, pr_number: int, body: str, author: str | None = None) -> None:
        if author:
            body = attribute_to_author(body, author)
        pr = self.get_pr(pr_number)
        pr.create_issue_comment(body)

    def close(self) -> None:
        self.http.close()
        self.github.close()
