"""Shared-prefix tree over MLST allele vectors.

Every profile is a chain of allele numbers, one per locus in schema order.
Profiles that agree on their first k alleles share the first k nodes, so a
lookup costs one dict access per locus rather than a scan over all profiles.

Nodes live in an arena: a node is an integer index into the parallel lists
``_children`` (allele -> child index) and ``_st``. Only nodes at depth
``n_loci - 1`` can carry a sequence type; every other node holds the
sentinel 0.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from rich.console import Console

from sttyper.core.errors import ProfileLengthMismatch

console = Console(stderr=True)

SENTINEL_ST = 0


class ProfileTrie:
    """Prefix tree keyed by allele number at each locus depth."""

    def __init__(self, n_loci: int):
        if n_loci < 1:
            raise ValueError(f'n_loci must be >= 1, got {n_loci}')
        self.n_loci = n_loci
        self.roots: Dict[int, int] = {}
        self._children: List[Dict[int, int]] = []
        self._st: List[int] = []
        # (kept ST, discarded ST) for identical allele vectors
        self.collisions: List[Tuple[int, int]] = []

    @classmethod
    def from_profiles(cls, profiles: Iterable, n_loci: int) -> 'ProfileTrie':
        trie = cls(n_loci)
        for profile in profiles:
            trie.insert(profile)
        return trie

    @classmethod
    def from_database(cls, db) -> 'ProfileTrie':
        """Compile every profile of a ProfileDatabase."""
        return cls.from_profiles(db.profiles.values(), db.n_loci)

    def _new_node(self) -> int:
        self._children.append({})
        self._st.append(SENTINEL_ST)
        return len(self._st) - 1

    def insert(self, profile) -> int:
        """Add one profile's allele chain and return its terminal node.

        Raises:
            ProfileLengthMismatch: If the vector length differs from n_loci.
        """
        alleles = profile.alleles
        if len(alleles) != self.n_loci:
            raise ProfileLengthMismatch(profile.st, self.n_loci, len(alleles))

        node = self.roots.get(alleles[0])
        if node is None:
            node = self._new_node()
            self.roots[alleles[0]] = node

        for allele in alleles[1:]:
            nexts = self._children[node]
            child = nexts.get(allele)
            if child is None:
                child = self._new_node()
                nexts[allele] = child
            node = child

        current = self._st[node]
        if current == SENTINEL_ST:
            self._st[node] = profile.st
        elif current != profile.st:
            kept, dropped = min(current, profile.st), max(current, profile.st)
            self._st[node] = kept
            self.collisions.append((kept, dropped))
            console.print(f'[yellow]Warning:[/yellow] ST {dropped} has the same alleles as ST {kept}; ST {kept} is reported for this profile')
        return node

    def root(self, allele: int) -> Optional[int]:
        return self.roots.get(allele)

    def child(self, node: int, allele: int) -> Optional[int]:
        return self._children[node].get(allele)

    def st_at(self, node: int) -> int:
        return self._st[node]

    @property
    def n_profiles(self) -> int:
        """Number of nodes that terminate a profile."""
        return sum(1 for st in self._st if st != SENTINEL_ST)

    def __len__(self):
        return len(self._st)

    def chains(self) -> Iterator[Tuple[int, Tuple[int, ...]]]:
        """Yield (st, alleles) for every terminal node, ordered by alleles."""
        stack = [(node, (allele,)) for allele, node in sorted(self.roots.items(), reverse=True)]
        while stack:
            node, path = stack.pop()
            if self._st[node] != SENTINEL_ST:
                yield self._st[node], path
            for allele, child in sorted(self._children[node].items(), reverse=True):
                stack.append((child, path + (allele,)))


__all__ = ['SENTINEL_ST', 'ProfileTrie']
