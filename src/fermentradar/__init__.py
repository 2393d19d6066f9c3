"""fermentradar -- feeding-urgency tracking for sourdough starters, kombucha and friends."""

__version__ = "0.1.0"
