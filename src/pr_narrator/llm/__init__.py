from pr_narrator.llm.client import LLMClient, LLMError, TextGenerator
from pr_narrator.llm.schemas import EvidenceTrace, TimelinePhase

__all__ = ["LLMClient", "LLMError", "TextGenerator", "EvidenceTrace", "TimelinePhase"]
