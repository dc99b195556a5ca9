"""
MedSide

Medicine package scanner: a photo of a box or blister goes to a vision
model with a fixed prompt, and the free-text answer is parsed into a
structured analysis (name, safety rating, side effects, studies,
recommendations, patient stories, alternatives, price, availability).

Architecture:
- domain/: Entities, value objects, section contract, ports, exceptions
- application/: Prompt builder, response parser, services, session
- infrastructure/: Vision model adapters (Gemini, OpenAI, Ollama)
- cross_cutting/: Logging, error handling, validation, disclaimers
- config/: Dataclass settings loaded from the environment
"""

__version__ = "1.0.0"
