"""Hierarchical value resolution for numeral expressions.

Responsibilities:
- Reduce an ordered lexeme sequence to one integer by positional-scale grouping
  (multiply-then-add).
- Reject incoherent sequences so callers can leave the source text unchanged.
"""

from __future__ import annotations

from typing import Sequence

from ..models.datatypes import (
    HUNDRED,
    TEEN,
    UNIT,
    NumberExpression,
    NumeralItem,
    ResolvedNumber,
)


_OPEN_GROUP = 4
_HUNDREDS_SLOT = 3
_TENS_SLOT = 2
_UNITS_SLOT = 1


class HierarchicalResolver:
    """Resolve numeral items with sub-thousand groups flushed at each big scale.

    Base values fill the hundreds/tens/units slots of the current group in
    strictly descending order. A hundred word after a lone unit multiplies it;
    a thousand-or-larger word multiplies the whole group and adds it to the
    running total. Big scales must strictly descend.
    """

    def resolve(self, items: Sequence[NumeralItem]) -> int | None:
        """Return the integer value of `items`, or `None` when incoherent."""

        if not items:
            return None

        total = 0
        group = 0
        group_size = 0
        open_slot = _OPEN_GROUP
        last_scale: int | None = None
        previous: NumeralItem | None = None

        for item in items:
            lexeme = item.lexeme
            if lexeme.is_base:
                if previous is not None and previous.lexeme.is_base and not item.conjoined:
                    return None
                slot = _UNITS_SLOT if lexeme.scale_class == UNIT else _TENS_SLOT
                if slot >= open_slot:
                    return None
                group += lexeme.value
                group_size += 1
                # A teen fills both the tens and the units slot.
                open_slot = _UNITS_SLOT if lexeme.scale_class == TEEN else slot
            elif lexeme.scale_class == HUNDRED:
                if (
                    previous is not None
                    and previous.lexeme.scale_class == UNIT
                    and group_size == 1
                    and not item.conjoined
                ):
                    group = previous.lexeme.value * lexeme.multiplier
                elif lexeme.is_plural_scale or open_slot <= _HUNDREDS_SLOT:
                    return None
                else:
                    group += lexeme.value
                    group_size += 1
                open_slot = _HUNDREDS_SLOT
            else:
                scale = lexeme.multiplier
                if last_scale is not None and scale >= last_scale:
                    return None
                if group_size:
                    if item.conjoined:
                        return None
                    total += group * scale
                elif lexeme.is_plural_scale:
                    return None
                else:
                    total += lexeme.value
                group = 0
                group_size = 0
                open_slot = _OPEN_GROUP
                last_scale = scale
            previous = item

        return total + group

    def resolve_expression(self, expression: NumberExpression) -> ResolvedNumber | None:
        """Resolve a detected expression into a positive `ResolvedNumber`."""

        value = self.resolve(expression.items)
        if value is None:
            return None
        return ResolvedNumber(integer_value=value)
