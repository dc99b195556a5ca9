"""
Domain Layer

Pure business logic with no external dependencies.
Contains entities, value objects, ports (interfaces), the section contract
and domain exceptions.
"""

from .entities import *
from .value_objects import *
from .ports import *
from .exceptions import *
from .sections import (
    SectionKind,
    SectionDefinition,
    SectionContract,
    CONTRACT_V1,
    CURRENT_PROMPT_VERSION,
    get_contract,
)
