from pr_narrator.digest.extractor import EvidenceExtractor, fallback_trace
from pr_narrator.digest.formatter import Report, format_report
from pr_narrator.digest.inputs import DigestInputs, build_inputs
from pr_narrator.digest.pipeline import DigestPipeline
from pr_narrator.digest.synthesizer import NarrativeSynthesizer

__all__ = [
    "DigestInputs",
    "DigestPipeline",
    "EvidenceExtractor",
    "NarrativeSynthesizer",
    "Report",
    "build_inputs",
    "fallback_trace",
    "format_report",
]
