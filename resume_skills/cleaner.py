"""
Clean-ups for the skill list returned by the model.
"""
from __future__ import annotations
from typing import Iterable, List

# ───────────────────────────────────────── helpers ──
def squash(s: str) -> str:
    """Strip and collapse inner whitespace; characters are left as the model wrote them."""
    return " ".join((s or "").split())

# ───────────────────────────────────────── cleaner ──
def normalise_skills(skills: Iterable[str]) -> List[str]:
    # order and duplicates are the model's; only blank entries go
    return [s for s in (squash(x) for x in skills) if s]
