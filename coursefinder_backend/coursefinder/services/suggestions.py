"""Autocomplete, fuzzy title suggestions and fuzzy course ranking."""
import logging
from dataclasses import dataclass, field

from coursefinder.core.concurrency import ordered_map
from coursefinder.core.errors import InternalScoringError
from coursefinder.models.course import CourseStatus
from coursefinder.services.catalog import CourseCatalog, CourseRecord
from coursefinder.services.edit_distance import overlap_similarity, similarity

logger = logging.getLogger(__name__)

_TITLE_CAP = 5
_SUBJECT_CAP = 5
_INSTRUCTOR_CAP = 3
_SUGGESTION_CAP = 10
_FUZZY_CAP = 5


@dataclass
class TermMatch:
    original_term: str
    matched_term: str
    score: float


@dataclass
class CourseMatch:
    course: CourseRecord
    score: float
    matched_fields: list[str] = field(default_factory=list)


def suggest_prefix(catalog: CourseCatalog, partial: str, min_length: int = 2) -> list[str]:
    """Substring (not prefix) matches against titles, subjects and instructors.

    Titles first, then ``"CODE - Title"`` subject pairs, then instructor
    names, each capped, ten in total.
    """
    if not partial or not partial.strip() or len(partial) < min_length:
        return []

    titles = [t for t in catalog.course_titles() if partial in t][:_TITLE_CAP]

    subjects: list[str] = []
    for s in catalog.subjects():
        if partial in s.code or partial in s.title:
            label = f"{s.code} - {s.title}"
            if label not in subjects:
                subjects.append(label)
        if len(subjects) == _SUBJECT_CAP:
            break

    instructors = [n for n in catalog.all_instructor_names() if partial in n][:_INSTRUCTOR_CAP]

    return [*titles, *subjects, *instructors][:_SUGGESTION_CAP]


def suggest_fuzzy(
    catalog: CourseCatalog,
    term: str,
    threshold: float,
    max_workers: int = 1,
) -> list[TermMatch]:
    """Titles and subject titles within ``threshold`` edit similarity of ``term``.

    Both sides are lower-cased before scoring. Best five, highest score
    first; equal scores keep catalog order.
    """
    if not term or not term.strip():
        return []

    candidates = catalog.all_titles()
    needle = term.lower()
    try:
        scores = ordered_map(lambda t: similarity(needle, t.lower()), candidates, max_workers)
    except Exception as exc:
        raise InternalScoringError(
            f"Scoring failed for {term!r}: {exc}", operation="suggest_fuzzy"
        ) from exc

    matches = [
        TermMatch(original_term=term, matched_term=candidate, score=score)
        for candidate, score in zip(candidates, scores)
        if score >= threshold
    ]
    matches.sort(key=lambda m: m.score, reverse=True)
    return matches[:_FUZZY_CAP]


def _course_score(course: CourseRecord, query: str) -> float:
    title = overlap_similarity(course.title.lower(), query)
    number = overlap_similarity(course.course_number.lower(), query)
    desc = overlap_similarity(course.description.lower(), query) if course.description else 0.0
    return max(title, number, desc)


def matched_fields(course: CourseRecord, query: str) -> list[str]:
    fields = []
    if query in course.course_number.lower():
        fields.append("course_number")
    if query in course.title.lower():
        fields.append("title")
    if course.description and query in course.description.lower():
        fields.append("description")
    if query in course.subject_code.lower():
        fields.append("subject_code")
    return fields


def rank_courses(
    catalog: CourseCatalog,
    query: str,
    max_results: int,
    floor: float,
    max_workers: int = 1,
) -> list[CourseMatch]:
    """Active courses scored by containment or character overlap.

    Scores must be strictly above ``floor``; best first, ties in catalog order.
    """
    needle = query.lower()
    page = catalog.query(lambda c: c.status == CourseStatus.active)
    try:
        scores = ordered_map(lambda c: _course_score(c, needle), page.courses, max_workers)
    except Exception as exc:
        raise InternalScoringError(
            f"Scoring failed for {query!r}: {exc}", operation="fuzzy_search"
        ) from exc

    ranked = [
        CourseMatch(course=course, score=score, matched_fields=matched_fields(course, needle))
        for course, score in zip(page.courses, scores)
        if score > floor
    ]
    ranked.sort(key=lambda m: m.score, reverse=True)
    logger.debug("Ranked %d of %d courses for %r", len(ranked), len(page.courses), query)
    return ranked[:max_results]
