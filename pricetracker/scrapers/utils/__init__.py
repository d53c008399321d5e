"""Scraper utilities for price normalization, retries and request identity."""

from .normalizer import PriceNormalizer, PricePolicy
from .retry import call_with_retry
from .user_agents import get_chrome_user_agent, CHROME_USER_AGENTS


__all__ = [
    # Normalization
    "PriceNormalizer",
    "PricePolicy",
    # Retry
    "call_with_retry",
    # User agents
    "get_chrome_user_agent",
    "CHROME_USER_AGENTS",
]
