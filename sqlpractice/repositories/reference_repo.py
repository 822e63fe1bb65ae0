from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from config.settings import get_settings
from databases import NORTHWIND, resolve_database_id

logger = logging.getLogger(__name__)

SQL_TOPIC = "sql"
DATA_MODEL_TOPIC = "data_model"


class ReferenceDataError(ValueError):
    """Raised when a reference file cannot be read or is missing required fields."""


@dataclass(slots=True)
class Question:
    number: int
    text: str
    solution: Optional[str] = None
    expected_outputs: Optional[object] = None


@dataclass(slots=True)
class Topic:
    name: str
    type: str
    database: str
    source_file: str
    questions: list[Question] = field(default_factory=list)

    @property
    def is_sql(self) -> bool:
        return self.type == SQL_TOPIC


def _read_json(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (json.JSONDecodeError, OSError) as exc:
        raise ReferenceDataError(f"Could not read reference file {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ReferenceDataError(f"Reference file {path.name} must contain a JSON object.")
    return data


def _parse_sql_questions(path: Path, entries: object) -> list[Question]:
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ReferenceDataError(f"'questions' in {path.name} must be a list.")

    questions: list[Question] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ReferenceDataError(f"Question entries in {path.name} must be objects.")
        try:
            number = int(entry["number"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ReferenceDataError(f"Question in {path.name} has no valid 'number'.") from exc
        solution = entry.get("solution_query")
        questions.append(
            Question(
                number=number,
                text=str(entry.get("text", "")).strip(),
                solution=str(solution).strip() if solution else None,
            )
        )
    return questions


def _parse_data_model_questions(path: Path, details: object) -> list[Question]:
    if details is None:
        return []
    if not isinstance(details, list):
        raise ReferenceDataError(f"'details' in {path.name} must be a list.")

    return [
        Question(
            number=index,
            text=str(detail.get("scenario", "")).strip(),
            expected_outputs=detail.get("Outputs"),
        )
        for index, detail in enumerate(details, start=1)
        if isinstance(detail, dict)
    ]


def load_topic_file(path: str | os.PathLike[str]) -> Topic:
    """Parse a single reference JSON file into a topic."""
    path = Path(path)
    data = _read_json(path)

    title = str(data.get("title", "")).strip()
    if not title:
        raise ReferenceDataError(f"Reference file {path.name} is missing a title.")

    prefix = "Northwind: " if path.name.startswith("n_") else "ClassicModels: "
    topic_type = DATA_MODEL_TOPIC if data.get("type") == "data model" else SQL_TOPIC
    default_database = NORTHWIND if path.name.startswith("n_") else None
    database = resolve_database_id(data.get("database") or default_database)

    if topic_type == SQL_TOPIC:
        questions = _parse_sql_questions(path, data.get("questions"))
    else:
        questions = _parse_data_model_questions(path, data.get("details"))

    return Topic(
        name=prefix + title,
        type=topic_type,
        database=database,
        source_file=path.name,
        questions=questions,
    )


def load_reference_topics(directory: str | os.PathLike[str] | None = None) -> list[Topic]:
    """Load every ``*.json`` topic file from the reference directory, sorted by file name."""
    settings = get_settings()
    base_dir = Path(directory) if directory else Path(settings.REFERENCE_FILES_DIR)
    if not base_dir.is_dir():
        logger.warning("Reference directory %s does not exist; no topics loaded", base_dir)
        return []

    topics = [load_topic_file(path) for path in sorted(base_dir.glob("*.json"))]
    logger.info("Loaded %d reference topic(s) from %s", len(topics), base_dir)
    return topics


def find_question(topics: Iterable[Topic], topic_name: str, number: int) -> Optional[Question]:
    for topic in topics:
        if topic.name != topic_name:
            continue
        for question in topic.questions:
            if question.number == number:
                return question
    return None
