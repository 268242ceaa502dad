"""Project heterogeneous source records onto the uniform searchable shape.

One pure mapping per record variant, dispatched on the ``corpus_type``
discriminant. Absent fields are skipped when building searchable text and never
cause a record to be rejected.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from corpus_search.domain.model import CorpusType, FactRecord, NarrationRecord, SourceRecord, VerseRecord
from corpus_search.domain.search import NormalizedRecord


DEFAULT_FACT_SOURCE_LABEL = "Islamic Data"
DEFAULT_NARRATION_SOURCE_LABEL = "Sahih Bukhari"


def join_text(*parts: str | None) -> str:
    """Join present, non-blank parts with single spaces."""
    return " ".join(part for part in parts if part and part.strip())


def normalize_fact(record: FactRecord) -> NormalizedRecord:
    sources = record.sources
    searchable_text = join_text(
        record.notes,
        sources.primary if sources else None,
        sources.verification if sources else None,
        sources.methodology if sources else None,
        record.fulfillment_evidence,
        record.claim_category,
    )
    return NormalizedRecord(
        id=f"fact-{record.id or record.title}",
        corpus_type=CorpusType.FACT,
        title=record.title,
        searchable_text=searchable_text,
        source_label=(sources.source if sources else "") or DEFAULT_FACT_SOURCE_LABEL,
        original_payload=record,
    )


def normalize_verse(record: VerseRecord) -> NormalizedRecord:
    title = join_text(record.chapter_name_en, str(record.verse_number) if record.verse_number else "")
    searchable_text = join_text(
        record.translated_text,
        record.arabic_text,
        record.chapter_name_en,
        record.chapter_name_ar,
        record.chapter_name_roman,
        record.place_of_revelation,
    )
    return NormalizedRecord(
        id=f"verse-{record.chapter_number}-{record.verse_number}",
        corpus_type=CorpusType.VERSE,
        title=title,
        searchable_text=searchable_text,
        source_label=f"Quran - {title}" if title else "Quran",
        original_payload=record,
    )


def normalize_narration(record: NarrationRecord) -> NormalizedRecord:
    searchable_text = join_text(
        record.text,
        record.arabic,
        record.translation,
        record.narrator,
        record.collection,
        record.chapter,
    )
    return NormalizedRecord(
        id=f"narration-{record.id or record.number}",
        corpus_type=CorpusType.NARRATION,
        title=f"Narration {record.number}" if record.number else "",
        searchable_text=searchable_text,
        source_label=record.collection or DEFAULT_NARRATION_SOURCE_LABEL,
        original_payload=record,
    )


_NORMALIZERS: dict[CorpusType, Callable] = {
    CorpusType.FACT: normalize_fact,
    CorpusType.VERSE: normalize_verse,
    CorpusType.NARRATION: normalize_narration,
}


def normalize(record: SourceRecord, corpus_type: CorpusType) -> NormalizedRecord:
    """Normalize a single record of the given corpus.

    Raises:
        ValueError: if ``corpus_type`` disagrees with the record's discriminant
    """
    if record.corpus_type is not corpus_type:
        raise ValueError(f"Record of type {record.corpus_type.value} passed as {corpus_type.value}")
    return _NORMALIZERS[corpus_type](record)


def normalize_all(records: Iterable[SourceRecord], corpus_type: CorpusType) -> list[NormalizedRecord]:
    return [normalize(record, corpus_type) for record in records]
