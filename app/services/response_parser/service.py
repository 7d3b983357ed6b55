"""
Response Parser Service

Memoizing front for parse_response. UI callers re-render often and hand the
same reply text in many times, so results are kept in a bounded LRU keyed by
the input string. Callers always receive their own copy.
"""

import copy
import threading
from collections import OrderedDict
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.logger import Logger
from app.services.response_parser.data_models import ParsedResponse
from app.services.response_parser.pipeline import has_visual_content, parse_response

logger = Logger("ResponseParserService")


class ResponseParserService:
    def __init__(self, cache_size: Optional[int] = None):
        self.cache_size = settings.PARSER_CACHE_SIZE if cache_size is None else cache_size
        self._cache: "OrderedDict[str, ParsedResponse]" = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    def parse(self, text: Any) -> ParsedResponse:
        if not isinstance(text, str) or self.cache_size <= 0:
            return parse_response(text)

        with self._lock:
            cached = self._cache.get(text)
            if cached is not None:
                self._cache.move_to_end(text)
                self._hits += 1
                return copy.deepcopy(cached)
            self._misses += 1

        # Parsing runs unlocked; a concurrent miss on the same text stores an equal result
        result = parse_response(text)
        with self._lock:
            self._cache[text] = result
            self._cache.move_to_end(text)
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
        return copy.deepcopy(result)

    def parse_to_dict(self, text: Any) -> Dict[str, Any]:
        """Wire shape plus the visual-content flag."""
        result = self.parse(text)
        data = result.to_dict()
        data["hasVisualContent"] = has_visual_content(result)
        return data

    def clear(self):
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0
        logger.debug("Parse cache cleared")

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            hits, misses, size = self._hits, self._misses, len(self._cache)
        total = hits + misses
        return {
            "size": size,
            "max_size": self.cache_size,
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / total, 3) if total else 0.0,
        }


response_parser_service = ResponseParserService()
