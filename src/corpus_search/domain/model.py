"""Domain model - source records for the three corpora.

Following Cosmic Python principles:
- Domain model has NO dependencies on infrastructure
- Records are immutable value objects once loaded
- The three record shapes form a closed union discriminated by ``corpus_type``

Records accept the field names used by the original data store as validation
aliases (``surah_no``, ``ayah_en``, ``prophecyCategory`` ...), so corpus snapshots
can be loaded without a translation step. Malformed scalar fields degrade to
empty strings or zero instead of rejecting the record.
"""

from enum import Enum
import math
import re
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class CorpusType(str, Enum):
    """Discriminant shared by source records, normalized records and results."""

    FACT = "fact"
    VERSE = "verse"
    NARRATION = "narration"


class FactCategory(str, Enum):
    """Closed set of category tags carried by fact records."""

    PROPHECY = "prophecy"
    SCIENTIFIC = "scientific"
    HEALTH = "health"
    TRADITIONAL_TREATMENTS = "traditional-treatments"
    QADR = "qadr"


class FulfillmentStatus(str, Enum):
    FULFILLED = "fulfilled"
    IN_PROGRESS = "in-progress"
    PENDING = "pending"
    PARTIALLY_FULFILLED = "partially-fulfilled"


class ClaimCategory(str, Enum):
    HISTORICAL = "historical"
    SCIENTIFIC = "scientific"
    SOCIAL = "social"
    NATURAL = "natural"
    COSMOLOGICAL = "cosmological"
    TECHNOLOGICAL = "technological"


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _coerce_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def _coerce_optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


# ASCII only: str.isdigit accepts superscripts and other digits int() rejects.
_LEADING_DIGITS = re.compile(r"\d+", re.ASCII)


class _SourceRecord(BaseModel):
    """Shared configuration for all source records."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> str:
        return _coerce_str(value)


class Citation(BaseModel):
    """Structured source citation attached to a fact."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    primary: str = ""
    verification: str = ""
    methodology: str = ""
    references: tuple[str, ...] = ()
    source: str = ""

    @field_validator("primary", "verification", "methodology", "source", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_str(value)

    @field_validator("references", mode="before")
    @classmethod
    def _references(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, (list, tuple)):
            return tuple(item for item in (_coerce_str(v) for v in value) if item)
        if isinstance(value, str) and value:
            return (value,)
        return ()


class FactRecord(_SourceRecord):
    """Short curated fact with optional citation and fulfillment metadata."""

    corpus_type: Literal[CorpusType.FACT] = CorpusType.FACT

    # Stored as plain strings; FactCategory and friends enumerate the known tags.
    category: str = Field(default="", validation_alias=AliasChoices("category", "type"))
    title: str = ""
    notes: str = ""
    sources: Citation | None = None
    status: str | None = None
    fulfillment_status: str | None = Field(
        default=None, validation_alias=AliasChoices("fulfillment_status", "fulfillmentStatus")
    )
    fulfillment_evidence: str | None = Field(
        default=None, validation_alias=AliasChoices("fulfillment_evidence", "fulfillmentEvidence")
    )
    claim_category: str | None = Field(
        default=None, validation_alias=AliasChoices("claim_category", "prophecyCategory")
    )
    year_revealed: int | None = Field(default=None, validation_alias=AliasChoices("year_revealed", "yearRevealed"))
    year_fulfilled: int | None = Field(
        default=None, validation_alias=AliasChoices("year_fulfilled", "yearFulfilled")
    )

    @field_validator("category", "title", "notes", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_str(value)

    @field_validator("status", "fulfillment_status", "fulfillment_evidence", "claim_category", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        return _coerce_str(value) or None

    @field_validator("year_revealed", "year_fulfilled", mode="before")
    @classmethod
    def _year(cls, value: Any) -> int | None:
        return _coerce_optional_int(value)

    @field_validator("sources", mode="before")
    @classmethod
    def _sources(cls, value: Any) -> Any:
        # Older snapshots store a bare list of reference strings.
        if isinstance(value, (list, tuple)):
            return {"references": value}
        if isinstance(value, str):
            return {"primary": value}
        return value


class VerseRecord(_SourceRecord):
    """A single verse with chapter metadata and both text variants."""

    corpus_type: Literal[CorpusType.VERSE] = CorpusType.VERSE

    chapter_number: int = Field(default=0, validation_alias=AliasChoices("chapter_number", "surah_no"))
    chapter_name_en: str = Field(default="", validation_alias=AliasChoices("chapter_name_en", "surah_name_en"))
    chapter_name_ar: str = Field(default="", validation_alias=AliasChoices("chapter_name_ar", "surah_name_ar"))
    chapter_name_roman: str = Field(
        default="", validation_alias=AliasChoices("chapter_name_roman", "surah_name_roman")
    )
    verse_number: int = Field(default=0, validation_alias=AliasChoices("verse_number", "ayah_no_surah"))
    global_verse_number: int = Field(
        default=0, validation_alias=AliasChoices("global_verse_number", "ayah_no_quran")
    )
    arabic_text: str = Field(default="", validation_alias=AliasChoices("arabic_text", "ayah_ar"))
    translated_text: str = Field(default="", validation_alias=AliasChoices("translated_text", "ayah_en"))
    place_of_revelation: str = ""
    prostration: bool = Field(default=False, validation_alias=AliasChoices("prostration", "sajah_ayah"))
    word_count: int = Field(default=0, validation_alias=AliasChoices("word_count", "no_of_word_ayah"))
    quarter_index: int = Field(default=0, validation_alias=AliasChoices("quarter_index", "hizb_quarter"))

    @field_validator(
        "chapter_number",
        "verse_number",
        "global_verse_number",
        "word_count",
        "quarter_index",
        mode="before",
    )
    @classmethod
    def _number(cls, value: Any) -> int:
        return _coerce_int(value)

    @field_validator(
        "chapter_name_en",
        "chapter_name_ar",
        "chapter_name_roman",
        "arabic_text",
        "translated_text",
        "place_of_revelation",
        mode="before",
    )
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_str(value)

    @field_validator("prostration", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return value is True or (isinstance(value, str) and value.strip().lower() == "true")


class NarrationRecord(_SourceRecord):
    """A narration entry; ``number`` is a string that usually parses as an int."""

    corpus_type: Literal[CorpusType.NARRATION] = CorpusType.NARRATION

    number: str = ""
    collection: str = Field(default="", validation_alias=AliasChoices("collection", "book"))
    chapter: str = ""
    narrator: str = ""
    text: str = Field(default="", validation_alias=AliasChoices("text", "english"))
    arabic: str | None = None
    translation: str | None = None
    grade: str | None = None
    reference: str | None = None

    @field_validator("number", "collection", "chapter", "narrator", "text", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_str(value)

    @field_validator("arabic", "translation", "grade", "reference", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        return _coerce_str(value) or None

    def parsed_number(self) -> int | None:
        """Leading integer of ``number`` (``"12a"`` -> 12), or None when absent."""
        match = _LEADING_DIGITS.match(self.number.strip())
        return int(match.group()) if match else None


SourceRecord = Annotated[FactRecord | VerseRecord | NarrationRecord, Field(discriminator="corpus_type")]

RECORD_TYPES: dict[CorpusType, type[FactRecord] | type[VerseRecord] | type[NarrationRecord]] = {
    CorpusType.FACT: FactRecord,
    CorpusType.VERSE: VerseRecord,
    CorpusType.NARRATION: NarrationRecord,
}
