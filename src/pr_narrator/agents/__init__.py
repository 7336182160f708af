from pr_narrator.agents.summarizer import SummarizerAgent

__all__ = ["SummarizerAgent"]
