"""Document loader — reads JSON document records from a directory."""

import json
import logging
from numbers import Real
from pathlib import Path

from fontes_qa.models import Document, LoadReport, RecordValidation, SkippedRecord

logger = logging.getLogger(__name__)

# Checked in this order; the first missing one is reported.
REQUIRED_FIELDS: tuple[str, ...] = ("id", "title", "url", "text")

RECORD_SUFFIX = ".json"


def _parse_embedding(value: object) -> list[float] | None:
    """Return the embedding as a list of floats, or None if unusable."""
    if not isinstance(value, list):
        return None
    if not all(isinstance(x, Real) and not isinstance(x, bool) for x in value):
        return None
    return [float(x) for x in value]


def validate_record(raw: object) -> RecordValidation:
    """Validate one parsed record against the document schema.

    A field counts as missing when it is absent, not a string, or blank.

    Args:
        raw: The decoded JSON value of one record file.

    Returns:
        A RecordValidation holding either the Document or the name of
        the first missing required field.
    """
    if not isinstance(raw, dict):
        return RecordValidation(reason=f"expected a JSON object, got {type(raw).__name__}")

    for name in REQUIRED_FIELDS:
        value = raw.get(name)
        if not isinstance(value, str) or not value.strip():
            return RecordValidation(
                missing_field=name,
                reason=f"missing required field '{name}'",
            )

    return RecordValidation(
        document=Document(
            id=raw["id"],
            title=raw["title"],
            url=raw["url"],
            text=raw["text"],
            embedding=_parse_embedding(raw.get("embedding")),
        )
    )


def _read_record(file_path: Path) -> object:
    return json.loads(file_path.read_text(encoding="utf-8"))


def load_documents(folder_path: str | Path) -> LoadReport:
    """Load all document records from a folder.

    Iterates over ``*.json`` files in filename order. Files that fail to
    parse, records missing a required field and duplicate ids are
    skipped with a warning; one bad file never aborts the batch.

    Args:
        folder_path: Path to the directory containing document records.

    Returns:
        A LoadReport with the valid documents and the skipped files.
        If the folder does not exist the report is empty and
        ``folder_exists`` is False.

    Raises:
        NotADirectoryError: If the path exists but is not a directory.
    """
    folder = Path(folder_path)
    if not folder.exists():
        logger.warning(
            "Documents folder not found: %s (create it and add JSON records "
            "with {id, title, url, text, embedding: null})",
            folder_path,
        )
        return LoadReport(folder_exists=False)
    if not folder.is_dir():
        raise NotADirectoryError(f"Not a directory: {folder_path}")

    documents: list[Document] = []
    skipped: list[SkippedRecord] = []
    seen_ids: set[str] = set()

    for file_path in sorted(folder.iterdir()):
        if not file_path.is_file() or file_path.suffix.lower() != RECORD_SUFFIX:
            continue

        try:
            raw = _read_record(file_path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Failed to read %s: %s", file_path.name, exc)
            skipped.append(SkippedRecord(filename=file_path.name, reason=str(exc)))
            continue

        outcome = validate_record(raw)
        if not outcome.is_valid:
            logger.warning("Skipping %s: %s", file_path.name, outcome.reason)
            skipped.append(
                SkippedRecord(
                    filename=file_path.name,
                    reason=outcome.reason or "invalid record",
                    missing_field=outcome.missing_field,
                )
            )
            continue

        doc = outcome.document
        if doc.id in seen_ids:
            logger.warning("Skipping %s: duplicate id '%s'", file_path.name, doc.id)
            skipped.append(
                SkippedRecord(filename=file_path.name, reason=f"duplicate id '{doc.id}'")
            )
            continue

        seen_ids.add(doc.id)
        documents.append(doc)
        logger.debug("Loaded: %s (%s)", file_path.name, doc.id)

    return LoadReport(documents=documents, skipped=skipped)
