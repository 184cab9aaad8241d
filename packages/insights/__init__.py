from .advisor import Advice, SpendingSummary, advise, build_advice_prompt, summarize

__all__ = ["Advice", "SpendingSummary", "advise", "build_advice_prompt", "summarize"]
