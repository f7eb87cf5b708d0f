"""Extraction of bolded ``**Song - Artist**`` pairs from generated text."""

from __future__ import annotations

import re
from typing import List, Optional

from .models import SongCandidate

_BOLD_PAIR_RE = re.compile(r"\*\*\s*(.*?)\s*-\s*(.*?)\s*\*\*")


def extract_song_candidates(text: Optional[str]) -> List[SongCandidate]:
    """
    Return every bolded "Song - Artist" pair in order of appearance.

    Text that does not follow the bolding convention yields an empty list;
    the generator is free-form, so a mismatch is not treated as an error.
    """
    if not text:
        return []
    candidates: List[SongCandidate] = []
    for match in _BOLD_PAIR_RE.finditer(text):
        song, artist = match.group(1).strip(), match.group(2).strip()
        candidates.append(SongCandidate(song=song, artist=artist))
    return candidates


__all__ = ["extract_song_candidates"]
