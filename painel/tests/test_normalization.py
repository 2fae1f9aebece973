"""Tests for client name normalization utilities."""
from ..utils.normalization import (
    extract_collaborators,
    generate_initials,
    normalize_client_name,
    normalize_text
)

def test_normalize_client_name():
    """Test client name normalization for various cases."""
    # Accents, case and legal suffixes
    assert normalize_client_name('Água Clara Ltda') == 'AGUA CLARA'
    assert normalize_client_name('SEARA LTDA') == 'SEARA'
    assert normalize_client_name('Seara Alimentos S/A') == 'SEARA ALIMENTOS'
    assert normalize_client_name('Seara Alimentos S.A.') == 'SEARA ALIMENTOS'
    assert normalize_client_name('Agro-Pecuária São José - ME') == 'AGRO PECUARIA SAO JOSE'
    assert normalize_client_name('Transportes Silva EIRELI EPP') == 'TRANSPORTES SILVA'

    # Whitespace and punctuation
    assert normalize_client_name('  seara   alimentos  ') == 'SEARA ALIMENTOS'
    assert normalize_client_name('Cocatrel, Industria.') == 'COCATREL INDUSTRIA'

    # Words that only look like suffixes are kept
    assert normalize_client_name('Mesa Comercio') == 'MESA COMERCIO'
    assert normalize_client_name('Cocatrel Industria') == 'COCATREL INDUSTRIA'

    # A name made only of suffixes keeps them
    assert normalize_client_name('LTDA') == 'LTDA'

def test_normalize_client_name_empty():
    """Empty input normalizes to an empty string."""
    assert normalize_client_name('') == ''
    assert normalize_client_name(None) == ''
    assert normalize_client_name('   ') == ''

def test_normalize_client_name_idempotent():
    """Normalizing twice gives the same key."""
    for name in ['Água Clara Ltda', 'Seara Alimentos S/A', 'Agro-Pecuária - ME', 'LTDA', 'x']:
        once = normalize_client_name(name)
        assert normalize_client_name(once) == once

def test_normalize_text():
    assert normalize_text('  Situação   Atual ') == 'situacao atual'
    assert normalize_text('Nº da Notificação') == 'no da notificacao'
    assert normalize_text(None) == ''

def test_generate_initials():
    assert generate_initials('Cocatrel Industria') == 'CI'
    assert generate_initials('seara') == 'S'
    assert generate_initials('Agua Clara do Sul') == 'AC'
    assert generate_initials('') == ''

def test_extract_collaborators():
    """Known team members are found in free text, in a fixed order."""
    assert extract_collaborators('Celine / Gabi') == ['celine', 'gabi']
    assert extract_collaborators('Vanessa e Darley') == ['darley', 'vanessa']
    assert extract_collaborators('CÉLINE') == ['celine']
    assert extract_collaborators('João') == []
    assert extract_collaborators(None) == []
