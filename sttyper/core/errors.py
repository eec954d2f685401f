"""Exceptions raised while loading profiles, calling alleles and compiling the trie.

An unresolved sequence type is not an error; see ``TypingResult`` in
``sttyper.core.engine``.
"""


class TypingError(Exception):
    """Base class for all sttyper errors."""


class MalformedProfileRow(TypingError, ValueError):
    """A profile definition row holds a field that is not a valid number."""

    def __init__(self, row_index, field, reason=None):
        self.row_index = row_index
        self.field = field
        self.reason = reason
        msg = f"Malformed profile row {row_index}: {field!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class MalformedHitRecord(TypingError, ValueError):
    """A hit record cannot be split into locus, allele and score."""

    def __init__(self, record_index, field, reason=None):
        self.record_index = record_index
        self.field = field
        self.reason = reason
        msg = f"Malformed hit record {record_index}: {field!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ProfileLengthMismatch(TypingError, ValueError):
    """An allele vector does not have one allele per schema locus."""

    def __init__(self, st, expected, observed):
        self.st = st
        self.expected = expected
        self.observed = observed
        super().__init__(
            f"ST {st}: expected {expected} alleles, got {observed}"
        )


__all__ = [
    'TypingError',
    'MalformedProfileRow',
    'MalformedHitRecord',
    'ProfileLengthMismatch',
]
