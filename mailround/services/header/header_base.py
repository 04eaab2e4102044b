"""Ordered header field storage with positional and by-name access."""

import io
from typing import BinaryIO, Iterable, List, Optional

from ...config.parser_config import FoldEncoding, default_fold_encoding
from ...models.line_break import Break
from .base import FieldIndexOutOfRangeError, FieldNotFoundError
from .field import Field


class HeaderBase:
    """
    Ordered list of fields plus the line break and fold rules to write them with.

    Name lookups are case-insensitive. Duplicate names are allowed and their
    order is kept.
    """

    def __init__(
        self,
        fields: Optional[Iterable[Field]] = None,
        lb: Break = Break.LF,
        fold_encoding: Optional[FoldEncoding] = None,
    ):
        self._fields: List[Field] = list(fields or [])
        self._lb = lb
        self._fold_encoding = fold_encoding if fold_encoding is not None else default_fold_encoding()
        self._terminated = True

    def _invalidate(self, name: str) -> None:
        """Hook run whenever fields with the given name are added or removed."""

    @property
    def break_(self) -> Break:
        return self._lb

    def set_break(self, lb: Break) -> None:
        self._lb = lb

    @property
    def fold_encoding(self) -> FoldEncoding:
        return self._fold_encoding

    def set_fold_encoding(self, fold_encoding: FoldEncoding) -> None:
        self._fold_encoding = fold_encoding

    @property
    def terminated(self) -> bool:
        """False for a header read without a blank line after it."""
        return self._terminated

    def set_terminated(self, terminated: bool) -> None:
        self._terminated = terminated

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self):
        return iter(list(self._fields))

    def get_field(self, n: int) -> Field:
        """
        Return the field at position n.

        Raises:
            FieldIndexOutOfRangeError: If n is not a valid position
        """
        if n < 0 or n >= len(self._fields):
            raise FieldIndexOutOfRangeError(f"field index {n} out of range")
        return self._fields[n]

    def get_field_named(self, name: str, n: int = 0) -> Optional[Field]:
        """Return the n-th field with the given name, or None."""
        fields = self.get_all_fields_named(name)
        if n < len(fields):
            return fields[n]
        return None

    def get_all_fields_named(self, name: str) -> List[Field]:
        key = name.lower()
        return [f for f in self._fields if f.name.lower() == key]

    def get_indexes_named(self, name: str) -> List[int]:
        key = name.lower()
        return [i for i, f in enumerate(self._fields) if f.name.lower() == key]

    def get_first(self, name: str) -> str:
        """
        Body of the first field with the given name.

        Raises:
            FieldNotFoundError: If no field has that name
        """
        field = self.get_field_named(name)
        if field is None:
            raise FieldNotFoundError(name)
        return field.body

    def get_all_bodies(self, name: str) -> List[str]:
        return [f.body for f in self.get_all_fields_named(name)]

    def list_fields(self) -> List[Field]:
        return list(self._fields)

    def insert_before_field(self, n: int, name: str, body: str) -> Field:
        """
        Insert a new field before position n.

        Positions past the end append; negative positions prepend.

        Returns:
            The inserted field
        """
        n = max(0, min(n, len(self._fields)))
        field = Field(name, body)
        self._fields.insert(n, field)
        self._invalidate(name)
        return field

    def append_field(self, name: str, body: str) -> Field:
        return self.insert_before_field(len(self._fields), name, body)

    def delete_field(self, n: int) -> None:
        """
        Remove the field at position n.

        Raises:
            FieldIndexOutOfRangeError: If n is not a valid position
        """
        field = self.get_field(n)
        del self._fields[n]
        self._invalidate(field.name)

    def clear_fields(self) -> None:
        names = {f.name for f in self._fields}
        self._fields = []
        for name in names:
            self._invalidate(name)

    def write_to(self, sink: BinaryIO) -> int:
        """
        Write the header, ending with the blank line when terminated.

        Returns:
            Number of bytes written
        """
        total = 0
        last = len(self._fields) - 1
        for i, field in enumerate(self._fields):
            data = field.render(self._fold_encoding, self._lb, terminate=self._terminated or i < last)
            sink.write(data)
            total += len(data)

        if self._terminated:
            sink.write(self._lb.terminator)
            total += len(self._lb.terminator)
        return total

    def __bytes__(self) -> bytes:
        buf = io.BytesIO()
        self.write_to(buf)
        return buf.getvalue()

    def clone(self) -> "HeaderBase":
        """Deep copy of the fields and settings."""
        other = HeaderBase()
        self._copy_into(other)
        return other

    def _copy_into(self, other: "HeaderBase") -> None:
        other._fields = [f.clone() for f in self._fields]
        other._lb = self._lb
        other._fold_encoding = self._fold_encoding
        other._terminated = self._terminated
