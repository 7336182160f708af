import logging
import re

from pr_narrator.digest.inputs import DigestInputs
from pr_narrator.github.models import PullRequestContext
from pr_narrator.llm.client import LLMError, TextGenerator
from pr_narrator.llm.prompts import FORBIDDEN_WORDS, NARRATIVE_STAGE, PromptTemplate, get_prompt
from pr_narrator.llm.schemas import EvidenceTrace

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^#{1,6}(?:\s|$)")
_BULLET_RE = re.compile(r"^(?:[-*+•]|\d+[.)])\s+")
_QUOTE_RE = re.compile(r"^(?:>\s?)+")
_RULE_RE = re.compile(r"^(?:[-*_]\s*){3,}$")
_SETEXT_RE = re.compile(r"^(?:=+|-+)$")
_EMPHASIS_RE = re.compile(r"\*\*|~~")
_ITALIC_RE = re.compile(r"(?<![\w*])\*(?!\s)([^*\n]+?)(?<!\s)\*(?![\w*])")
_STRONG_UNDERSCORE_RE = re.compile(r"(?<!\w)__(?=\S)(.+?)(?<=\S)__(?!\w)")
_ITALIC_UNDERSCORE_RE = re.compile(r"(?<!\w)_(?=[^\s_])([^_]+?)(?<=[^\s_])_(?!\w)")
_CODE_SPAN_RE = re.compile(r"(`[^`]*`)")
_SENTENCE_RE = re.compile(r"(?<=[.!?])\s+")
_HEDGING_RE = re.compile(r"\b(?:" + "|".join(FORBIDDEN_WORDS) + r")\b", re.IGNORECASE)


def _strip_emphasis(paragraph: str) -> str:
    # Code spans are left untouched so `__init__` survives
    parts = _CODE_SPAN_RE.split(paragraph)
    for i in range(0, len(parts), 2):
        part = _EMPHASIS_RE.sub("", parts[i])
        part = _ITALIC_RE.sub(r"\1", part)
        part = _STRONG_UNDERSCORE_RE.sub(r"\1", part)
        parts[i] = _ITALIC_UNDERSCORE_RE.sub(r"\1", part)
    return "".join(parts)


def strip_markdown(text: str) -> str:
    """Flatten a response into one plain paragraph."""
    lines = []
    prev_is_text = False
    for line in text.splitlines():
        line = line.strip()
        # "Title\n=====" and "Title\n-----" are headings
        if prev_is_text and _SETEXT_RE.match(line):
            lines.pop()
            prev_is_text = False
            continue
        prev_is_text = False
        if not line or line.startswith("```") or _RULE_RE.match(line) or _SETEXT_RE.match(line):
            continue
        line = _QUOTE_RE.sub("", line)
        if _HEADING_RE.match(line):
            continue
        line = _BULLET_RE.sub("", line)
        if line:
            lines.append(line)
            prev_is_text = True

    paragraph = _strip_emphasis(" ".join(lines))
    return re.sub(r"\s+", " ", paragraph).strip()


def drop_hedged_sentences(paragraph: str) -> str:
    kept = [s for s in _SENTENCE_RE.split(paragraph) if s and not _HEDGING_RE.search(s)]
    return " ".join(kept).strip()


def clean_narrative(text: str) -> str | None:
    paragraph = strip_markdown(text)
    cleaned = drop_hedged_sentences(paragraph)
    if cleaned != paragraph:
        logger.info("Dropped hedged sentences from narrative")
    return cleaned or None


class NarrativeSynthesizer:
    def __init__(self, llm: TextGenerator, prompt: PromptTemplate | None = None):
        self.llm = llm
        self.prompt = prompt or get_prompt(NARRATIVE_STAGE, "v2")

    def synthesize(
        self, context: PullRequestContext, inputs: DigestInputs, trace: EvidenceTrace
    ) -> str | None:
        """Single attempt. None means there is nothing to publish."""
        system, user = self.prompt.render(
            pr_title=context.title,
            pr_description=context.description,
            commit_messages=inputs.commit_messages,
            files_changed=inputs.files_changed,
            diff_summary=inputs.diff_summary,
            evidence=trace.to_prompt_json(),
        )

        try:
            text = self.llm.complete(
                system,
                user,
                temperature=self.prompt.temperature,
                max_tokens=self.prompt.max_tokens,
                seed=self.prompt.seed,
                json_mode=self.prompt.json_mode,
            )
        except LLMError as e:
            logger.warning("Narrative synthesis failed: %s", e)
            return None

        return clean_narrative(text.strip())
