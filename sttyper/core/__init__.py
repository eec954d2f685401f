"""Core MLST typing algorithms.

Submodules:
- profiles: Profile definition loading
- alleles: Best-hit allele calling from KMA results
- trie: Shared-prefix tree over profile allele vectors
- engine: Sequence type assignment
- errors: Parse and precondition errors
"""

from sttyper.core.alleles import AlleleCall, call_alleles, order_calls, parse_hit_id, read_hits
from sttyper.core.engine import NOT_FOUND, TypingEngine, TypingResult
from sttyper.core.errors import (
    MalformedHitRecord,
    MalformedProfileRow,
    ProfileLengthMismatch,
    TypingError,
)
from sttyper.core.profiles import Profile, ProfileDatabase, parse_profiles, read_profiles
from sttyper.core.trie import SENTINEL_ST, ProfileTrie

__all__ = [
    'AlleleCall',
    'call_alleles',
    'order_calls',
    'parse_hit_id',
    'read_hits',
    'NOT_FOUND',
    'TypingEngine',
    'TypingResult',
    'MalformedHitRecord',
    'MalformedProfileRow',
    'ProfileLengthMismatch',
    'TypingError',
    'Profile',
    'ProfileDatabase',
    'parse_profiles',
    'read_profiles',
    'SENTINEL_ST',
    'ProfileTrie',
]
