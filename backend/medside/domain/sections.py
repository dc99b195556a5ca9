"""
Section Contract

The named sections the vision model is asked to return, in order.

Prompt building and response parsing both read from this module, so a
change to section names or order is made once and versioned here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

from .exceptions import UnknownPromptVersionError


class SectionKind(Enum):
    """How a section body is turned into a field value."""

    TEXT = "text"
    LIST = "list"
    RATING = "rating"


@dataclass(frozen=True)
class SectionDefinition:
    """
    One section of the model's answer.

    Attributes:
        field_name: MedicineAnalysis attribute the section populates
        title: Heading the model is told to use
        hint: Bracketed instruction shown after the heading in the prompt
        kind: Post-processing applied to the section body
        aliases: Other headings accepted when parsing
    """

    field_name: str
    title: str
    hint: str
    kind: SectionKind = SectionKind.TEXT
    aliases: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def headings(self) -> Tuple[str, ...]:
        """All accepted headings, longest first."""
        return tuple(sorted({self.title, *self.aliases}, key=len, reverse=True))


@dataclass(frozen=True)
class SectionContract:
    """An ordered, versioned set of sections."""

    version: str
    sections: Tuple[SectionDefinition, ...]

    def __iter__(self):
        return iter(self.sections)

    def __len__(self) -> int:
        return len(self.sections)

    @property
    def titles(self) -> Tuple[str, ...]:
        return tuple(s.title for s in self.sections)


CONTRACT_V1 = SectionContract(
    version="v1",
    sections=(
        SectionDefinition(
            "name", "Medicine Name",
            "Full name and active ingredients",
            aliases=("Name", "Medicine", "Drug Name"),
        ),
        SectionDefinition(
            "rating", "Safety Rating",
            "Rate from 1-10 based on FDA/EMA safety data",
            kind=SectionKind.RATING,
            aliases=("Rating", "Safety Score"),
        ),
        SectionDefinition(
            "side_effects", "Side Effects",
            "List common and serious side effects based on clinical studies",
            kind=SectionKind.LIST,
            aliases=("Adverse Effects",),
        ),
        SectionDefinition(
            "studies", "Recent Studies",
            "Summarize 2-3 recent clinical studies or meta-analyses about this medicine",
            kind=SectionKind.LIST,
            aliases=("Studies", "Clinical Studies"),
        ),
        SectionDefinition(
            "recommendations", "Recommendations",
            "Usage guidelines, contraindications, and important warnings",
            aliases=("Recommendation", "Usage Recommendations"),
        ),
        SectionDefinition(
            "user_stories", "User Stories",
            "2-3 real patient experiences with this medicine",
            kind=SectionKind.LIST,
            aliases=("Patient Stories", "Patient Experiences"),
        ),
        SectionDefinition(
            "alternatives", "Alternatives",
            "2-3 alternative medicines with similar effects",
            kind=SectionKind.LIST,
            aliases=("Alternative Medicines",),
        ),
        SectionDefinition(
            "price_range", "Price Range",
            "Estimated price range in USD",
            aliases=("Price", "Estimated Price"),
        ),
        SectionDefinition(
            "availability", "Availability",
            "Prescription status and availability",
        ),
    ),
)

CURRENT_PROMPT_VERSION = CONTRACT_V1.version

CONTRACTS: Dict[str, SectionContract] = {
    CONTRACT_V1.version: CONTRACT_V1,
}


def get_contract(version: str = CURRENT_PROMPT_VERSION) -> SectionContract:
    """
    Look up the section contract for a prompt version.

    Raises:
        UnknownPromptVersionError: If no contract is registered
    """
    try:
        return CONTRACTS[version]
    except KeyError:
        raise UnknownPromptVersionError(version, known=sorted(CONTRACTS))
