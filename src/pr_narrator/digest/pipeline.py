import logging
from typing import Sequence

from pr_narrator.diff.filters import filter_files
from pr_narrator.diff.parser import parse_diff
from pr_narrator.digest.extractor import EvidenceExtractor
from pr_narrator.digest.formatter import Report, format_report
from pr_narrator.digest.inputs import build_inputs
from pr_narrator.digest.synthesizer import NarrativeSynthesizer
from pr_narrator.github.models import PullRequestContext
from pr_narrator.llm.client import TextGenerator
from pr_narrator.llm.prompts import PromptTemplate

logger = logging.getLogger(__name__)


class DigestPipeline:
    """diff -> files -> filtered files -> evidence -> narrative -> report."""

    def __init__(
        self,
        llm: TextGenerator,
        exclude_patterns: Sequence[str] = (),
        evidence_prompt: PromptTemplate | None = None,
        narrative_prompt: PromptTemplate | None = None,
    ):
        self.exclude_patterns = list(exclude_patterns)
        self.extractor = EvidenceExtractor(llm, evidence_prompt)
        self.synthesizer = NarrativeSynthesizer(llm, narrative_prompt)

    def run(self, context: PullRequestContext, diff_text: str) -> Report | None:
        if not diff_text or not diff_text.strip():
            logger.info("No diff found, nothing to summarize")
            return None

        files = parse_diff(diff_text)
        if not files:
            logger.info("Diff contains no parseable file changes")
            return None

        kept = filter_files(files, self.exclude_patterns)
        if len(kept) < len(files):
            logger.info("Excluded %d of %d file(s)", len(files) - len(kept), len(files))

        inputs = build_inputs(context.commits, kept)
        trace = self.extractor.extract(inputs)
        narrative = self.synthesizer.synthesize(context, inputs, trace)
        if narrative is None:
            logger.info("No narrative produced, nothing to publish")
            return None

        return format_report(narrative, files)
