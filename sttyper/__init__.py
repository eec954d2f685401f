"""sttyper: MLST sequence typing against a profile trie."""

__version__ = '1.0.0'
