"""Sequence type assignment by walking the profile trie."""

from dataclasses import dataclass
from typing import Sequence, Tuple

from sttyper.core.trie import SENTINEL_ST, ProfileTrie

NOT_FOUND = 'NF'


@dataclass(frozen=True)
class TypingResult:
    """Outcome of one classification.

    ``st`` is the sentinel 0 when no profile was reached; that is a normal
    result, not an error. ``depth`` counts the calls consumed by the walk.
    """
    st: int
    depth: int
    calls: Tuple[Tuple[str, int], ...] = ()

    @property
    def resolved(self) -> bool:
        return self.st != SENTINEL_ST

    @property
    def label(self) -> str:
        return str(self.st) if self.resolved else NOT_FOUND


class TypingEngine:
    """Classify ordered allele calls against a compiled ProfileTrie.

    The trie is only read, so one engine can type any number of samples.
    """

    def __init__(self, trie: ProfileTrie):
        self.trie = trie

    def classify(self, ordered_calls: Sequence[Tuple[str, int]]) -> TypingResult:
        """Follow the calls down a single chain of the trie.

        The walk stops at the first allele with no matching child and reports
        whatever ST the last reached node holds. It never backtracks into
        sibling branches.
        """
        calls = tuple((locus, allele) for locus, allele in ordered_calls)
        if not calls:
            return TypingResult(st=SENTINEL_ST, depth=0, calls=calls)

        node = self.trie.root(calls[0][1])
        if node is None:
            return TypingResult(st=SENTINEL_ST, depth=0, calls=calls)

        depth = 1
        for _, allele in calls[1:]:
            child = self.trie.child(node, allele)
            if child is None:
                break
            node = child
            depth += 1

        return TypingResult(st=self.trie.st_at(node), depth=depth, calls=calls)


__all__ = ['NOT_FOUND', 'TypingResult', 'TypingEngine']
