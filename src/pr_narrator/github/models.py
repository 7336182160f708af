from dataclasses import dataclass, field


@dataclass(frozen=True)
class CommitInfo:
    sha: str
    message: str


@dataclass(frozen=True)
class PullRequestContext:
    owner: str
    repo: str
    number: int
    title: str = ""
    description: str = ""
    author: str = ""
    commits: tuple[CommitInfo, ...] = field(default_factory=tuple)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
