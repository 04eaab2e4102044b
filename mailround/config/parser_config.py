"""Configuration models for parsing and re-emitting messages."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Sentinel fold length meaning "never fold"
DO_NOT_FOLD = -1

# Sentinel recursion depth meaning "no limit"
UNLIMITED_DEPTH = -1


class FoldEncoding(BaseModel):
    """
    Rules used to fold header fields that have no raw bytes to fall back on.

    A line is kept under preferred_fold_length when whitespace allows it,
    and is never longer than forced_fold_length. Continuation lines start
    with indent.
    """

    model_config = ConfigDict(frozen=True)

    indent: str = " "
    preferred_fold_length: int = 80
    forced_fold_length: int = 1000

    @field_validator("indent")
    def validate_indent(cls, v: str) -> str:
        if not v:
            raise ValueError("fold indent must be at least one byte")
        if len(v) > 4:
            raise ValueError("fold indent must be no more than four bytes")
        if v.strip(" \t"):
            raise ValueError("fold indent may only contain spaces and tabs")
        return v

    @model_validator(mode="after")
    def validate_lengths(self) -> "FoldEncoding":
        preferred = self.preferred_fold_length
        forced = self.forced_fold_length

        if (preferred == DO_NOT_FOLD) != (forced == DO_NOT_FOLD):
            raise ValueError("preferred and forced fold lengths must both be DO_NOT_FOLD or neither")
        if preferred == DO_NOT_FOLD:
            return self

        if preferred < 3:
            raise ValueError("preferred fold length must be at least 3")
        if forced < preferred:
            raise ValueError("forced fold length may not be shorter than preferred fold length")
        if len(self.indent) >= preferred:
            raise ValueError("fold indent must be shorter than preferred fold length")
        return self

    @property
    def folds(self) -> bool:
        """False when this encoding never folds."""
        return self.preferred_fold_length != DO_NOT_FOLD


DEFAULT_FOLD_ENCODING = FoldEncoding()
DO_NOT_FOLD_ENCODING = FoldEncoding(
    preferred_fold_length=DO_NOT_FOLD, forced_fold_length=DO_NOT_FOLD
)


class ParserConfig(BaseModel):
    """
    Options controlling how a message is parsed.

    Attributes:
        max_depth: Multipart nesting to decompose; 0 never parses multipart
            bodies, 1 parses only the top level, -1 is unlimited
        chunk_size: Bytes read per step while looking for the end of the header
        max_header_length: Largest header accepted in bytes; 0 for no limit
        max_part_length: Largest multipart child accepted in bytes; 0 for no limit
        decode_transfer_encoding: Decode the bodies of leaf parts while parsing
    """

    max_depth: int = 10
    chunk_size: int = 16384
    max_header_length: int = 65536
    max_part_length: int = 0
    decode_transfer_encoding: bool = False

    @field_validator("max_depth")
    def validate_max_depth(cls, v: int) -> int:
        if v < UNLIMITED_DEPTH:
            raise ValueError("max_depth must be -1 (unlimited) or non-negative")
        return v

    @field_validator("chunk_size")
    def validate_chunk_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("chunk_size must be positive")
        return v

    @field_validator("max_header_length", "max_part_length")
    def validate_length(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Length limits must be zero (unlimited) or positive")
        return v

    def without_multipart(self) -> "ParserConfig":
        """Copy that leaves every body opaque."""
        return self.model_copy(update={"max_depth": 0})

    def without_recursion(self) -> "ParserConfig":
        """Copy that parses only the top-level multipart."""
        return self.model_copy(update={"max_depth": 1})

    def with_unlimited_recursion(self) -> "ParserConfig":
        return self.model_copy(update={"max_depth": UNLIMITED_DEPTH})

    def descend(self) -> "ParserConfig":
        """Copy used for the children of a multipart part."""
        if self.max_depth == UNLIMITED_DEPTH:
            return self
        return self.model_copy(update={"max_depth": max(self.max_depth - 1, 0)})

    @property
    def parses_multipart(self) -> bool:
        return self.max_depth != 0


class CharsetConfig(BaseModel):
    """Charset registry settings."""

    load_standard_charsets: bool = False


class AppConfig(BaseModel):
    """Main library configuration."""

    schema_version: str = "1.0"
    parser: ParserConfig = Field(default_factory=ParserConfig)
    fold: FoldEncoding = Field(default_factory=FoldEncoding)
    charsets: CharsetConfig = Field(default_factory=CharsetConfig)

    @field_validator("schema_version")
    def validate_schema_version(cls, v: str) -> str:
        if not v:
            raise ValueError("schema_version is required")
        return v


_default_parser_config: Optional[ParserConfig] = None
_default_fold_encoding: FoldEncoding = DEFAULT_FOLD_ENCODING


def default_parser_config() -> ParserConfig:
    """Process-wide parser options used when no config is passed explicitly."""
    global _default_parser_config
    if _default_parser_config is None:
        _default_parser_config = ParserConfig()
    return _default_parser_config


def set_default_parser_config(config: ParserConfig) -> None:
    """Replace the process-wide parser options."""
    global _default_parser_config
    _default_parser_config = config


def default_fold_encoding() -> FoldEncoding:
    """Fold rules given to newly built headers."""
    return _default_fold_encoding


def set_default_fold_encoding(fold_encoding: FoldEncoding) -> None:
    """Replace the fold rules given to newly built headers."""
    global _default_fold_encoding
    _default_fold_encoding = fold_encoding
