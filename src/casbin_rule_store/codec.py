"""Rule codec - map policy lines to fixed-width rule records and back.

A policy line is an ordered tuple of 0..6 strings (subject, object, action, ...).
Storage holds it as a RuleRecord: a ptype discriminator plus six positional
value fields v0..v5, where the empty string marks an absent field.

Record layout:
    RuleRecord
    ├── ptype: "p", "g", "g2", ... (engine-defined)
    └── v0..v5: positional fields ("" = absent)

The codec is pure and stateless. It never parses or escapes field values.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from casbin_rule_store.constants import (
    MAX_RULE_FIELDS,
    POLICY_LINE_SEPARATOR,
    PTYPE_COLUMN,
    VALUE_COLUMNS,
)

__all__ = [
    "RuleRecord",
    "encode_rule",
    "decode_rule",
    "build_filter_rule",
    "prefix_match_fields",
]


class RuleRecord(BaseModel):
    """One persisted policy rule.

    Attributes:
        ptype: Rule type tag (e.g. "p" for permissions, "g" for role grouping).
        v0..v5: Positional rule fields. Empty string means "absent".
    """

    ptype: str
    v0: str = ""
    v1: str = ""
    v2: str = ""
    v3: str = ""
    v4: str = ""
    v5: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def values(self) -> tuple[str, ...]:
        """The six value fields in column order."""
        return tuple(getattr(self, column) for column in VALUE_COLUMNS)

    def to_row(self) -> dict[str, str]:
        """Column mapping for an INSERT."""
        return self.model_dump()

    def value_row(self) -> dict[str, str]:
        """Column mapping of v0..v5 only, for an UPDATE that keeps ptype."""
        return self.model_dump(exclude={PTYPE_COLUMN})

    def match_fields(self) -> dict[str, str]:
        """Equality filter over ptype and every non-empty value field.

        Empty fields are left unconstrained, so a record built from a rule
        prefix matches every stored row sharing that prefix.
        """
        match = {PTYPE_COLUMN: self.ptype}
        for column, value in zip(VALUE_COLUMNS, self.values):
            if value != "":
                match[column] = value
        return match

    def __str__(self) -> str:
        return decode_rule(self)


def encode_rule(ptype: str, rule: Sequence[str]) -> RuleRecord:
    """Encode a policy line as a RuleRecord.

    Fields past the sixth are dropped without error. Shorter rules leave
    the trailing fields empty.

    Args:
        ptype: Rule type tag.
        rule: Ordered rule fields.

    Returns:
        RuleRecord holding the first six fields of the rule.
    """
    values = dict(zip(VALUE_COLUMNS, rule[:MAX_RULE_FIELDS]))
    return RuleRecord(ptype=ptype, **values)


def decode_rule(record: RuleRecord) -> str:
    """Rebuild the engine's comma-separated policy line from a record.

    Each value field is appended only if it is non-empty, and each field is
    tested on its own. An empty field followed by a non-empty one is skipped
    rather than ending the line, so ``("", "x")`` decodes to ``"p, x"`` and
    "x" lands in position 0 when the engine re-tokenizes the line. Stored
    tables written by earlier releases rely on this output.

    Args:
        record: Stored rule.

    Returns:
        Line of the form ``"ptype, v0, v1, ..."``.
    """
    parts = [record.ptype]
    parts.extend(value for value in record.values if value != "")
    return POLICY_LINE_SEPARATOR.join(parts)


def build_filter_rule(ptype: str, field_index: int, field_values: Sequence[str]) -> RuleRecord:
    """Build a partial record whose values start at position ``field_index``.

    Field k receives ``field_values[k - field_index]`` for every k in 0..5
    with ``field_index <= k < field_index + len(field_values)``. A negative
    field_index skips the leading values.

    Example:
        >>> build_filter_rule("p", 1, ["data1", "read"]).match_fields()
        {'ptype': 'p', 'v1': 'data1', 'v2': 'read'}
    """
    values = {
        column: field_values[k - field_index]
        for k, column in enumerate(VALUE_COLUMNS)
        if field_index <= k < field_index + len(field_values)
    }
    return RuleRecord(ptype=ptype, **values)


def prefix_match_fields(ptype: str, rule: Sequence[str]) -> dict[str, str]:
    """Equality filter over ptype and every field the rule supplies.

    Unlike RuleRecord.match_fields, empty strings inside the rule are
    constrained too; only positions past the rule's length are free.
    """
    match = {PTYPE_COLUMN: ptype}
    match.update(zip(VALUE_COLUMNS, rule[:MAX_RULE_FIELDS]))
    return match
