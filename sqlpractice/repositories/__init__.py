"""Reference question repository helpers."""

from .reference_repo import (
    DATA_MODEL_TOPIC,
    SQL_TOPIC,
    Question,
    ReferenceDataError,
    Topic,
    find_question,
    load_reference_topics,
    load_topic_file,
)

__all__ = [
    "DATA_MODEL_TOPIC",
    "SQL_TOPIC",
    "Question",
    "ReferenceDataError",
    "Topic",
    "find_question",
    "load_reference_topics",
    "load_topic_file",
]
