"""
Data-binding surface for the model's settings.

A host settings control binds its input field to ``vola_shift`` here.
Edits land in the model's pending shift only; nothing reaches pricing
until ``apply()`` (or the host's own apply_changes call) commits them.
"""

from decimal import Decimal
from typing import Union

ShiftValue = Union[Decimal, str, int, float]


def to_decimal(value: ShiftValue) -> Decimal:
    """Convert a user-entered shift to Decimal; floats go through str to keep 0.02 as 0.02."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


class ModelParamsControl:
    """Binding target for one opening of the model's settings."""

    def __init__(self, model):
        self._model = model

    @property
    def vola_shift(self) -> Decimal:
        return self._model.vola_shift_temp

    @vola_shift.setter
    def vola_shift(self, value: ShiftValue) -> None:
        self._model.vola_shift_temp = to_decimal(value)

    def apply(self) -> None:
        self._model.apply_changes()
