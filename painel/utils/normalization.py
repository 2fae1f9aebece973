"""Client name normalization utilities.

This module provides functions for turning client names as they appear in
spreadsheets and PDF reports into a canonical comparison key, so that
"Água Clara Ltda", "AGUA CLARA" and "Agua-Clara" all compare equal.
"""

import logging
import re
import unicodedata
from typing import Optional

logger = logging.getLogger(__name__)

# Brazilian corporate suffixes that carry no identity
LEGAL_SUFFIXES = frozenset({'LTDA', 'ME', 'EPP', 'EIRELI', 'SA', 'MEI'})

_SOCIEDADE_ANONIMA = re.compile(r'\bS\s*[/.]\s*A\b\.?')
_SEPARATORS = re.compile(r'[-/\\_]')
_PUNCTUATION = re.compile(r'[^\w\s]')


def strip_accents(value: str) -> str:
    """Remove diacritics by decomposing and dropping combining marks."""
    decomposed = unicodedata.normalize('NFKD', value)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_client_name(name: Optional[str]) -> str:
    """Normalize a client name for consistent matching.

    Applies the following transformations in order:
    1. Decompose unicode and drop diacritics
    2. Convert to uppercase
    3. Remove the "S/A" and "S.A." forms of sociedade anônima
    4. Replace hyphens and slashes with spaces
    5. Strip remaining punctuation
    6. Drop legal suffix tokens (LTDA, ME, EPP, EIRELI, SA, MEI), unless
       nothing else would remain
    7. Collapse whitespace

    The result is idempotent: normalizing a normalized name returns it
    unchanged. Empty or whitespace-only input yields an empty string.

    Args:
        name: The client name to normalize

    Returns:
        The normalized version of the name

    Examples:
        >>> normalize_client_name("Água Clara Ltda")
        'AGUA CLARA'
        >>> normalize_client_name("Seara Alimentos S/A")
        'SEARA ALIMENTOS'
        >>> normalize_client_name("Agro-Pecuária São José - ME")
        'AGRO PECUARIA SAO JOSE'
    """
    if not name or not str(name).strip():
        return ''

    value = strip_accents(str(name)).upper()
    value = _SOCIEDADE_ANONIMA.sub(' ', value)
    value = _SEPARATORS.sub(' ', value)
    value = _PUNCTUATION.sub('', value)

    tokens = value.split()
    kept = [token for token in tokens if token not in LEGAL_SUFFIXES]
    if kept:
        tokens = kept

    result = ' '.join(tokens)
    logger.debug(f"Normalized client name {name!r} -> {result!r}")
    return result


def normalize_text(value: Optional[str]) -> str:
    """Lower-case, accent-free, whitespace-collapsed form of a cell value.

    Used to compare headers and status labels, where suffix stripping
    would be wrong.
    """
    if value is None:
        return ''
    return ' '.join(strip_accents(str(value)).lower().split())


def generate_initials(name: str) -> str:
    """Two-letter initials for a new client ("Cocatrel Industria" -> "CI")."""
    words = [word for word in str(name or '').split() if word]
    initials = ''.join(word[0] for word in words)[:2]
    return initials.upper()


# Team members whose names are recognised in "Responsável" cells
KNOWN_COLLABORATORS = ('celine', 'gabi', 'darley', 'vanessa')


def extract_collaborators(responsavel: Optional[str]) -> list:
    """Known collaborators mentioned in a free-text responsible field."""
    text = normalize_text(responsavel)
    return [name for name in KNOWN_COLLABORATORS if name in text]
