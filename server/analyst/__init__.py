"""
On-demand headline and game analysis grounded in the live market snapshot,
plus the background strategic game tracker.
"""
from analyst.games import GameTracker
from analyst.groq_client import GroqClient
from analyst.service import HeadlineAnalyst

__all__ = ["GameTracker", "GroqClient", "HeadlineAnalyst"]
