"""
Response Parser

Turns the vision model's free-text answer into a MedicineAnalysis.

Parsing never fails: whatever cannot be extracted falls back to an empty
default and the result is flagged as degraded, so a mostly-complete answer
still reaches the user.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple
import logging
import re

from ..domain.entities.medicine_analysis import MedicineAnalysis, clamp_rating
from ..domain.sections import (
    SectionContract,
    SectionKind,
    SectionDefinition,
    get_contract,
    CURRENT_PROMPT_VERSION,
)


logger = logging.getLogger(__name__)


# A line that ends the current section without starting a new one
_RULE_PATTERN = re.compile(r"^\s*(?:-{3,}|\*{3,}|_{3,}|={3,})\s*$")

# Bullet or enumeration prefix of a list item
_BULLET_PATTERN = re.compile(r"^(?:[-*+]\s+|[•·▪–—]\s*|\(?\d{1,2}[.)]\s+)")

# First number in the rating section; accepts a decimal comma
_NUMBER_PATTERN = re.compile(r"(?<![\w.])[-+]?\d+(?:[.,]\d+)?")

_EMPHASIS = "*_` "


def _drop_unpaired_close(text: str) -> str:
    """Remove a bold close left over from a heading line wrapped in bold."""
    for marker in ("**", "__"):
        if text.endswith(marker) and text.count(marker) % 2 == 1:
            return text[:-len(marker)].rstrip()
    return text


@dataclass
class _MarkerHit:
    """A line recognized as a section heading."""

    line_index: int
    section: SectionDefinition
    inline_text: str
    is_title: bool
    is_numbered: bool

    @property
    def rank(self) -> Tuple[int, int]:
        # Canonical headings beat aliases, numbered headings beat bare ones
        return (int(self.is_title), int(self.is_numbered))


def _build_marker_pattern(contract: SectionContract) -> Tuple[Pattern, Dict[str, SectionDefinition]]:
    by_heading: Dict[str, SectionDefinition] = {}
    for section in contract:
        for heading in section.headings:
            by_heading.setdefault(heading.lower(), section)

    alternation = "|".join(
        r"\s+".join(re.escape(word) for word in heading.split())
        for heading in sorted(by_heading, key=len, reverse=True)
    )

    pattern = re.compile(
        r"^[ \t]*"
        r"(?:\#{1,6}[ \t]*)?"                       # markdown heading
        r"(?:[-*•+][ \t]+)?"                        # bullet
        r"(?P<number>\(?\d{1,2}[.)][ \t]*)?"         # 1.  1)  (1)
        r"(?:\*\*|__)?[ \t]*"                       # bold open
        rf"(?P<heading>{alternation})"
        r"(?:[ \t]*\([^)\n]*\))?"                   # "(1-10)" and similar
        r"[ \t]*(?:\*\*|__)?[ \t]*"                 # bold close
        r"(?:"
        r"[:：][ \t]*(?:\*\*|__)?(?P<rest>.*)"       # "Heading: text"
        r"|[-–—][ \t]+(?P<dashed>.*)"               # "Heading - text"
        r"|"                                        # heading alone
        r")$",
        re.IGNORECASE,
    )
    return pattern, by_heading


class ResponseParser:
    """
    Parses model text against a versioned section contract.

    Section markers are matched at line starts, case-insensitively, with
    numbering prefixes ("1.", "1)"), markdown decoration and a small set
    of alias headings tolerated. Each section's body runs until the next
    chosen marker, a horizontal rule, or the end of the text.

    Usage:
        parser = ResponseParser()
        analysis = parser.parse(raw_text)
        if analysis.degraded:
            warn(analysis.missing_fields)
    """

    def __init__(self, default_version: str = CURRENT_PROMPT_VERSION):
        # Fail early on an unknown default version
        get_contract(default_version)
        self.default_version = default_version
        self._patterns: Dict[str, Tuple[Pattern, Dict[str, SectionDefinition]]] = {}
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def parse(self, text: Optional[str], prompt_version: Optional[str] = None) -> MedicineAnalysis:
        """
        Parse raw model text into a MedicineAnalysis.

        Args:
            text: Raw response text (may be empty or malformed)
            prompt_version: Contract the prompt was built from

        Returns:
            MedicineAnalysis, flagged as degraded if any field defaulted

        Raises:
            UnknownPromptVersionError: If the version has no contract
        """
        contract = get_contract(prompt_version or self.default_version)
        bodies = self.split_sections(text or "", contract)

        values: Dict[str, object] = {}
        missing: List[str] = []

        for section in contract:
            body = bodies.get(section.field_name)

            if section.kind == SectionKind.RATING:
                rating = self._parse_rating(body)
                values[section.field_name] = rating if rating is not None else 0.0
                if rating is None:
                    missing.append(section.field_name)

            elif section.kind == SectionKind.LIST:
                values[section.field_name] = self._parse_list(body)
                if body is None:
                    missing.append(section.field_name)

            else:
                value = self._parse_text(body)
                values[section.field_name] = value
                if not value:
                    missing.append(section.field_name)

        analysis = MedicineAnalysis(
            **values,
            degraded=bool(missing),
            missing_fields=missing,
            prompt_version=contract.version,
        )

        if missing:
            self.logger.warning(
                f"Degraded parse ({len(missing)}/{len(contract)} fields defaulted): {', '.join(missing)}"
            )
        else:
            self.logger.debug(f"Parsed complete analysis: {analysis}")

        return analysis

    def split_sections(self, text: str, contract: SectionContract) -> Dict[str, str]:
        """
        Split text into raw section bodies keyed by field name.

        Sections that never appear are absent from the result; a heading
        with no text after it maps to "".
        """
        pattern, by_heading = self._pattern_for(contract)
        lines = text.splitlines()

        # Pick one heading line per section
        chosen: Dict[str, _MarkerHit] = {}
        for index, line in enumerate(lines):
            match = pattern.match(line)
            if not match:
                continue
            heading = re.sub(r"\s+", " ", match.group("heading")).lower()
            section = by_heading[heading]
            hit = _MarkerHit(
                line_index=index,
                section=section,
                inline_text=_drop_unpaired_close((match.group("rest") or match.group("dashed") or "").strip()),
                is_title=heading == section.title.lower(),
                is_numbered=bool(match.group("number")),
            )
            current = chosen.get(section.field_name)
            if current is None or hit.rank > current.rank:
                chosen[section.field_name] = hit

        hits = sorted(chosen.values(), key=lambda h: h.line_index)
        if hits and hits[0].line_index > 0:
            self.logger.debug(f"Ignoring {hits[0].line_index} preamble line(s)")

        bodies: Dict[str, str] = {}
        for position, hit in enumerate(hits):
            end = hits[position + 1].line_index if position + 1 < len(hits) else len(lines)
            body_lines = [hit.inline_text] if hit.inline_text else []
            for line in lines[hit.line_index + 1:end]:
                if _RULE_PATTERN.match(line):
                    break
                body_lines.append(line)
            bodies[hit.section.field_name] = "\n".join(body_lines).strip()

        return bodies

    def _pattern_for(self, contract: SectionContract) -> Tuple[Pattern, Dict[str, SectionDefinition]]:
        if contract.version not in self._patterns:
            self._patterns[contract.version] = _build_marker_pattern(contract)
        return self._patterns[contract.version]

    @staticmethod
    def _strip_emphasis(value: str) -> str:
        value = value.strip()
        # Only unwrap balanced emphasis such as "**Aspirin**"
        if len(value) > 1 and value[0] in "*_`" and value[-1] == value[0]:
            return value.strip(_EMPHASIS)
        return value

    def _parse_text(self, body: Optional[str]) -> str:
        if not body:
            return ""
        lines = [self._strip_emphasis(line) for line in body.splitlines()]
        return "\n".join(line for line in lines if line)

    def _parse_list(self, body: Optional[str]) -> List[str]:
        if not body:
            return []
        items = []
        for line in body.splitlines():
            item = _BULLET_PATTERN.sub("", line.strip(), count=1)
            item = self._strip_emphasis(item)
            if item:
                items.append(item)
        return items

    @staticmethod
    def _parse_rating(body: Optional[str]) -> Optional[float]:
        if not body:
            return None
        match = _NUMBER_PATTERN.search(body)
        if not match:
            return None
        try:
            value = float(match.group(0).replace(",", "."))
        except ValueError:
            return None
        return clamp_rating(value)
