"""Extract the key skills from a résumé with an LLM."""

__version__ = "0.1.0"
