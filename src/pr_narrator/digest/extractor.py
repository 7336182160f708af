import json
import logging
import re

from pydantic import ValidationError

from pr_narrator.digest.inputs import DigestInputs
from pr_narrator.llm.client import LLMError, TextGenerator
from pr_narrator.llm.prompts import EVIDENCE_STAGE, PromptTemplate, get_prompt
from pr_narrator.llm.schemas import EvidenceTrace, TimelinePhase

logger = logging.getLogger(__name__)

FALLBACK_PHASE = "Raw change record"

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


class MalformedEvidenceError(ValueError):
    pass


def fallback_trace(inputs: DigestInputs) -> EvidenceTrace:
    """One-phase trace carrying the raw inputs verbatim."""
    raw = "\n\n".join([
        f"Commit Messages:\n{inputs.commit_messages}",
        f"Files Changed:\n{inputs.files_changed}",
        f"Diff Summary:\n{inputs.diff_summary}",
    ])
    return EvidenceTrace(
        timeline=[
            TimelinePhase(
                phase=FALLBACK_PHASE,
                goal="Structured evidence was unavailable; raw change data follows.",
                changes=[raw],
            )
        ]
    )


def parse_evidence(text: str) -> EvidenceTrace:
    """Validate a model response against the EvidenceTrace schema.

    Tolerates code fences and chatter around the JSON object.
    """
    cleaned = _FENCE_RE.sub("", text.strip())
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start == -1 or end <= start:
        raise MalformedEvidenceError("No JSON object in response")

    try:
        data = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise MalformedEvidenceError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedEvidenceError("Response is not a JSON object")

    try:
        return EvidenceTrace.model_validate(data)
    except ValidationError as e:
        raise MalformedEvidenceError(f"Schema mismatch: {e.error_count()} error(s)") from e


class EvidenceExtractor:
    def __init__(self, llm: TextGenerator, prompt: PromptTemplate | None = None):
        self.llm = llm
        self.prompt = prompt or get_prompt(EVIDENCE_STAGE, "v1")

    def extract(self, inputs: DigestInputs) -> EvidenceTrace:
        """Always returns a well-formed trace; falls back on any failure."""
        system, user = self.prompt.render(
            commit_messages=inputs.commit_messages,
            files_changed=inputs.files_changed,
            diff_summary=inputs.diff_summary,
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
            logger.warning("Evidence extraction failed, using raw fallback: %s", e)
            return fallback_trace(inputs)

        try:
            trace = parse_evidence(text)
        except MalformedEvidenceError as e:
            logger.warning("Malformed evidence trace, using raw fallback: %s", e)
            return fallback_trace(inputs)

        if trace.is_degenerate():
            logger.warning("Degenerate evidence trace, using raw fallback")
            return fallback_trace(inputs)

        return trace
