"""nlswap - natural-language commands for a constant-product pair exchange."""

from nlswap.service import IntentService, get_default_service

__version__ = "0.1.0"
__all__ = ["IntentService", "get_default_service", "__version__"]
