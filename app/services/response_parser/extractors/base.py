"""
Extractor base class.

Each pipeline stage is a ResponseExtractor. It reads the open lines of a
ParseContext, claims the lines it turned into entities and returns an
ExtractionResult. An empty result means "nothing found"; extractors never
raise for malformed text.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from app.services.response_parser.context import ParseContext
from app.services.response_parser.data_models import SectionType


@dataclass
class ExtractionResult:
    """Entities found by one stage plus the line indices it consumed."""
    content: Any = None
    claimed: List[int] = field(default_factory=list)

    @property
    def found(self) -> bool:
        if self.content is None:
            return False
        if isinstance(self.content, (list, str)):
            return len(self.content) > 0
        return True


class ResponseExtractor(ABC):
    """Base class for pipeline stages."""

    # Section emitted for a non-empty result; None for stages that only feed another stage
    section_type: Optional[SectionType] = None
    section_title: Optional[str] = None
    # Stages without a section of their own hand their items to a later section
    feeds_section: Optional[SectionType] = None
    merged_title: Optional[str] = None

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def extract(self, ctx: ParseContext) -> ExtractionResult:
        pass

    def run(self, ctx: ParseContext) -> ExtractionResult:
        """Extract and commit the claimed lines to the context."""
        result = self.extract(ctx)
        if result.found:
            ctx.claim(result.claimed)
        return result
