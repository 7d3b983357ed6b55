import re
from typing import List

from app.services.response_parser.context import ParseContext
from app.services.response_parser.data_models import SectionType, TableData
from app.services.response_parser.extractors.base import ExtractionResult, ResponseExtractor

ROW_RE = re.compile(r'^\s*\|(.+)\|\s*$')
SEPARATOR_RE = re.compile(r'^\s*\|[-:| ]+\|\s*$')


def split_row(row: str) -> List[str]:
    cells = [cell.strip() for cell in row.strip().split("|")]
    if cells and not cells[0]:
        cells = cells[1:]
    if cells and not cells[-1]:
        cells = cells[:-1]
    return cells


class TableExtractor(ResponseExtractor):
    """First markdown pipe table: header row, separator row, one or more body rows."""

    section_type = SectionType.TABLE

    @property
    def name(self) -> str:
        return "table"

    def extract(self, ctx: ParseContext) -> ExtractionResult:
        lines = ctx.open_lines()
        for pos in range(len(lines) - 2):
            header_index, header = lines[pos]
            if not ROW_RE.match(header) or SEPARATOR_RE.match(header):
                continue
            if not SEPARATOR_RE.match(lines[pos + 1][1]):
                continue

            body = []
            for index, line in lines[pos + 2:]:
                if not ROW_RE.match(line) or SEPARATOR_RE.match(line):
                    break
                body.append((index, line))
            if not body:
                continue

            table = TableData(
                headers=split_row(header),
                rows=[split_row(line) for _, line in body],
            )
            claimed = [header_index, lines[pos + 1][0]] + [index for index, _ in body]
            return ExtractionResult(content=table, claimed=claimed)

        return ExtractionResult()
