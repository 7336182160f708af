from dataclasses import dataclass

EVIDENCE_STAGE = "evidence"
NARRATIVE_STAGE = "narrative"

DEFAULT_SEED = 69

FORBIDDEN_WORDS = (
    "likely",
    "possibly",
    "probably",
    "suggests",
    "appears",
    "might",
    "may",
    "seems",
    "could",
)


class PromptNotFoundError(KeyError):
    pass


@dataclass(frozen=True)
class PromptTemplate:
    """Instruction pair plus the sampling parameters it was tuned for."""

    stage: str
    version: str
    system: str
    user: str
    temperature: float
    max_tokens: int
    seed: int = DEFAULT_SEED
    json_mode: bool = False

    def render(self, **fields: str) -> tuple[str, str]:
        return self.system, self.user.format(**fields)


_REGISTRY: dict[tuple[str, str], PromptTemplate] = {}


def register(template: PromptTemplate) -> PromptTemplate:
    _REGISTRY[(template.stage, template.version)] = template
    return template


def get_prompt(stage: str, version: str) -> PromptTemplate:
    try:
        return _REGISTRY[(stage, version)]
    except KeyError:
        raise PromptNotFoundError(f"No prompt registered for {stage}/{version}") from None


def available_versions(stage: str) -> list[str]:
    return sorted(v for s, v in _REGISTRY if s == stage)


EVIDENCE_SCHEMA = """{
  "timeline": [
    {"phase": "string", "goal": "string", "changes": ["string"]}
  ],
  "modulesTouched": ["string"],
  "notablePatterns": ["string"],
  "validatedChanges": ["string"]
}"""

EVIDENCE_V1 = register(
    PromptTemplate(
        stage=EVIDENCE_STAGE,
        version="v1",
        system="\n".join([
            "You are a meticulous code archaeologist.",
            "Reconstruct what a pull request changed using ONLY the commit messages, file list and diff summary you are given.",
            "Do not speculate. Do not infer behavior, intent or files that are not present in the supplied data.",
            "If the data does not support a statement, leave it out.",
            "Respond with a single JSON object and nothing else, matching exactly this schema:",
            EVIDENCE_SCHEMA,
            "Definitions:",
            "- phase: a short name for one coherent step of the work, in the order the commits show it happening.",
            "- goal: one sentence stating what that step set out to do, as stated by its commits or visible in its files.",
            "- changes: concrete edits belonging to the phase, each naming the file or module it touched.",
            "- modulesTouched: top-level modules, packages or directories that contain changed files.",
            "- notablePatterns: recurring kinds of change across files (for example new tests, renamed APIs, removed dead code, configuration updates).",
            "- validatedChanges: changes that are confirmed by BOTH a commit message and the diff summary.",
            "Every list must be present. Use an empty list when nothing qualifies.",
        ]),
        user="\n".join([
            "Commit Messages:",
            "{commit_messages}",
            "",
            "Files Changed:",
            "{files_changed}",
            "",
            "Diff Summary:",
            "{diff_summary}",
        ]),
        temperature=0.1,
        max_tokens=2048,
        json_mode=True,
    )
)

# Single-call summary, kept selectable for comparison runs
NARRATIVE_V1 = register(
    PromptTemplate(
        stage=NARRATIVE_STAGE,
        version="v1",
        system=(
            "You are an expert code summarizer. Your task is to produce a concise summary of a pull request's "
            "changes in a few sentences. Include key aspects such as which files were affected, the intent behind "
            "the changes, and any notable impact. Do not include extraneous commentary. "
            "No markdown. No headers. No lists. "
            f"Forbidden words: {', '.join(FORBIDDEN_WORDS)}."
        ),
        user="\n".join([
            "Please provide a concise summary of the following pull request changes.",
            "",
            "Context:",
            "- Files Changed: {files_changed}",
            "- PR Title: {pr_title}",
            "- PR Description: {pr_description}",
            "",
            "Commit Messages:",
            "{commit_messages}",
            "",
            "Diff Summary:",
            "{diff_summary}",
            "",
            "Provide the summary in a short paragraph.",
        ]),
        temperature=0.3,
        max_tokens=1024,
    )
)

NARRATIVE_V2 = register(
    PromptTemplate(
        stage=NARRATIVE_STAGE,
        version="v2",
        system=" ".join([
            "You are a senior code reviewer with deep architectural context.",
            "Your job is to tell the exact story of this pull request.",
            "The evidence trace and the diff summary are the source of truth.",
            "When signals conflict, trust them in this order: evidence trace and diff summary first, then the PR description, then raw commit messages.",
            "Use the PR title and description only as context to clarify intent already visible in the evidence.",
            "If a detail is not in the evidence, omit it.",
            "Be definitive. Do not hedge. Do not speculate.",
            f"Forbidden words: {', '.join(FORBIDDEN_WORDS)}.",
            "Explain what changed and why it matters. Prioritize behavior and contracts over filenames.",
            "Write a single continuous paragraph.",
            "No markdown. No headers. No lists. No bullets. No bold or italic emphasis. No em dashes.",
            "Target 120 to 220 words.",
            "Before you output, silently check that every claim is backed by the evidence and that no forbidden word appears. Do not include the check in your answer.",
            "BAD OUTPUT EXAMPLE:",
            "Refactored the data loader. Added async handling. Introduced cache. Fixed error handling.",
            "[BAD: sentence fragments without structure, explanation or flow.]",
            "GOOD OUTPUT EXAMPLE:",
            "The legacy synchronous data loading mechanism was removed and replaced with an asynchronous abstraction that batches network requests.",
            "In place of the old `loadData()` call, the implementation now uses `fetchAndCacheData()`, which introduces client-side caching backed by a dedicated storage module,",
            "and error handling now wraps failures in a `DataLoadError` so partial batches are reported with their cause.",
        ]),
        user="\n".join([
            "PR Title (context only):",
            "{pr_title}",
            "",
            "PR Description (context only):",
            "{pr_description}",
            "",
            "Commit Messages (lowest priority):",
            "{commit_messages}",
            "",
            "Diff Summary (source of truth):",
            "{diff_summary}",
            "",
            "Evidence Trace (primary fact source):",
            "{evidence}",
            "",
            "Instructions:",
            "Write one confident paragraph that narrates the change from the evidence.",
        ]),
        temperature=0.7,
        max_tokens=1024,
    )
)
