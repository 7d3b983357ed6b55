import re

from app.services.response_parser.context import ParseContext
from app.services.response_parser.data_models import SectionType
from app.services.response_parser.extractors.base import ExtractionResult, ResponseExtractor
from app.services.response_parser.text_utils import strip_bold

# "HEADLINE: x", "**HEADLINE:** x", "## Headline: x", "Headline:x"
HEADLINE_RE = re.compile(
    r'^\s*(?:#{1,3}\s*)?(?:\*\*)?\s*headline\s*(?:\*\*)?\s*:\s*(?:\*\*)?(.+)$',
    re.IGNORECASE,
)
# A whole first line in bold
BOLD_LINE_RE = re.compile(r'\*\*([^*\n]+)\*\*')


class HeadlineExtractor(ResponseExtractor):
    """Explicit headline marker first, then a bold opening line. First match only."""

    section_type = SectionType.HEADLINE

    @property
    def name(self) -> str:
        return "headline"

    def extract(self, ctx: ParseContext) -> ExtractionResult:
        for index, line in ctx.open_lines():
            match = HEADLINE_RE.match(line)
            if not match:
                continue
            headline = strip_bold(match.group(1)).strip()
            if headline:
                return ExtractionResult(content=headline, claimed=[index])

        if ctx.lines and not ctx.is_claimed(0):
            match = BOLD_LINE_RE.fullmatch(ctx.lines[0].rstrip())
            if match and match.group(1).strip():
                return ExtractionResult(content=match.group(1).strip(), claimed=[0])

        return ExtractionResult()
