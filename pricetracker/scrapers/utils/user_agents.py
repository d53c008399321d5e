"""Desktop Chrome user-agent strings for the headless Chromium sessions.

Only Chrome identities are listed: advertising Firefox or Safari from a
Chromium engine is easier for anti-bot scripts to spot than a stock UA.
"""

import random
from typing import List


CHROME_USER_AGENTS: List[str] = [
    # Windows
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
    # macOS
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
    # Linux
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
]


def get_chrome_user_agent() -> str:
    """Get a random desktop Chrome user-agent string.

    Returns:
        Random Chrome user-agent string
    """
    return random.choice(CHROME_USER_AGENTS)
