from pr_narrator.github.client import GitHubClient
from pr_narrator.github.models import CommitInfo, PullRequestContext

__all__ = ["GitHubClient", "CommitInfo", "PullRequestContext"]
