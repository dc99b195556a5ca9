"""
Prompt Builder

Builds the fixed instruction sent to the vision model with every image.
"""

from functools import lru_cache

from ..domain.sections import SectionContract, get_contract, CURRENT_PROMPT_VERSION


PROMPT_HEADER = (
    "Analyze this medicine image and provide a detailed analysis "
    "in the following format:"
)

EVIDENCE_GUIDANCE = """Please base your analysis on:
- FDA/EMA approved documentation
- Recent clinical studies (last 5 years)
- Meta-analyses of side effects
- Drug interaction databases
- Patient safety reports
- Real patient testimonials and experiences"""

FORMAT_RULES = """Format the response as a structured analysis with clear sections.
Start every section on its own line with its number and heading exactly as shown above, followed by a colon.
Write list sections (Side Effects, Recent Studies, User Stories, Alternatives) as one bullet per line.
Give the Safety Rating as a single number out of 10."""


@lru_cache(maxsize=None)
def _render(contract: SectionContract) -> str:
    lines = [PROMPT_HEADER]
    for number, section in enumerate(contract, 1):
        lines.append(f"{number}. {section.title}: [{section.hint}]")

    return "\n".join(lines) + "\n\n" + EVIDENCE_GUIDANCE + "\n\n" + FORMAT_RULES


class PromptBuilder:
    """
    Renders the instruction text for one prompt version.

    The section list comes from the shared section contract, which is
    also what ResponseParser scans for.
    """

    def __init__(self, version: str = CURRENT_PROMPT_VERSION):
        self._contract = get_contract(version)

    @property
    def version(self) -> str:
        return self._contract.version

    @property
    def contract(self) -> SectionContract:
        return self._contract

    def build(self) -> str:
        """Return the instruction text. Pure: same output on every call."""
        return _render(self._contract)
