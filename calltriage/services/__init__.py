"""Analysis, post-call processing and OpenMic integration"""

from calltriage.services.analyzer import SentimentAnalyzer
from calltriage.services.openmic import OpenMicClient, PlatformBot, map_platform_bot
from calltriage.services.postcall import PostCallPipeline, DEFAULT_CRISIS_KEYWORDS

__all__ = [
    "SentimentAnalyzer",
    "OpenMicClient",
    "PlatformBot",
    "map_platform_bot",
    "PostCallPipeline",
    "DEFAULT_CRISIS_KEYWORDS",
]
