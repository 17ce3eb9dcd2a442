"""Course search orchestration.

A search moves through building the predicate, querying the catalog,
optional scoring (fuzzy matches, eligibility) and assembling the result.
Validation happens before the catalog is touched; a catalog failure aborts
the call. Suggestion and fuzzy-search entry points are best-effort and
degrade to empty answers.
"""
import logging
import math
import threading
import time
from datetime import datetime, timezone

from coursefinder.core.config import Settings, settings
from coursefinder.core.errors import CatalogQueryError, SearchCancelledError, SearchError
from coursefinder.schemas.course import CourseResponse
from coursefinder.schemas.search import (
    EligibilityResult,
    FilterCriteria,
    FilterResult,
    FilterSummary,
    FuzzyMatch,
    FuzzySearchResultItem,
    PageMetadata,
    SearchCriteria,
    SearchResult,
)
from coursefinder.services.catalog import CatalogPage, CourseCatalog, CourseRecord, Predicate
from coursefinder.services.criteria import (
    all_of,
    course_ids_in,
    translate,
    translate_filter,
    validate_filter_criteria,
    validate_search_criteria,
)
from coursefinder.services.eligibility import Eligibility, evaluate_all
from coursefinder.services.suggestions import rank_courses, suggest_fuzzy, suggest_prefix

logger = logging.getLogger(__name__)


def _check_cancelled(cancel: threading.Event | None, operation: str) -> None:
    if cancel is not None and cancel.is_set():
        raise SearchCancelledError("Search was cancelled.", operation=operation)


def page_metadata(page_number: int, page_size: int, total: int) -> PageMetadata:
    total_pages = math.ceil(total / page_size) if total else 0
    return PageMetadata(
        page_number=page_number,
        page_size=page_size,
        total_pages=total_pages,
        has_next=page_number < total_pages,
        has_previous=page_number > 1,
    )


def filter_summary(courses: list[CourseRecord]) -> FilterSummary:
    """Aggregates over the returned page only, not the full match set."""
    if not courses:
        return FilterSummary(total_courses=0, subject_count=0, avg_credit_hours=0.0)
    return FilterSummary(
        total_courses=len(courses),
        subject_count=len({c.subject_code for c in courses}),
        avg_credit_hours=round(sum(c.credit_hours for c in courses) / len(courses), 2),
    )


def _eligibility_out(results: list[Eligibility]) -> list[EligibilityResult]:
    return [
        EligibilityResult(
            course_id=r.course_id,
            is_eligible=r.is_eligible,
            prerequisite_status=r.status,
            missing_requirements=r.missing_requirements,
        )
        for r in results
    ]


def _courses_out(courses: list[CourseRecord]) -> list[CourseResponse]:
    return [CourseResponse.model_validate(c, from_attributes=True) for c in courses]


class CourseSearchService:
    def __init__(self, catalog: CourseCatalog, config: Settings | None = None):
        self.catalog = catalog
        self.config = config or settings

    # ── Primary operations ────────────────────────────────────────────────

    def search_courses(
        self, criteria: SearchCriteria, cancel: threading.Event | None = None
    ) -> SearchResult:
        started = time.perf_counter()
        page_size = criteria.page_size if criteria.page_size is not None else self.config.default_page_size
        validate_search_criteria(criteria, page_size, self.config.max_page_size)
        predicate = translate(criteria)

        logger.info("Starting course search with criteria: %s", criteria.model_dump(exclude_none=True))
        page = self._query("search_courses", predicate, criteria.page_number, page_size, cancel)
        _check_cancelled(cancel, "search_courses")

        keywords = " ".join(criteria.keywords or [])
        suggestions = self.get_search_suggestions(keywords) if keywords.strip() else None

        fuzzy_matches = None
        if criteria.enable_fuzzy_search:
            threshold = criteria.fuzzy_search_threshold
            if threshold is None:
                threshold = self.config.fuzzy_threshold
            fuzzy_matches = self.get_fuzzy_suggestions(keywords, threshold)

        eligibility = None
        if criteria.check_eligibility:
            eligibility = _eligibility_out(
                evaluate_all(page.courses, criteria.completed_courses, self.config.scoring_concurrency)
            )

        elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
        logger.info("Course search completed. Found %d results in %.1fms", page.total, elapsed_ms)

        return SearchResult(
            courses=_courses_out(page.courses),
            total_count=page.total,
            page=page_metadata(criteria.page_number, page_size, page.total),
            search_duration_ms=elapsed_ms,
            filter_summary=filter_summary(page.courses),
            suggestions=suggestions,
            fuzzy_matches=fuzzy_matches,
            eligibility_results=eligibility,
        )

    def filter_courses(
        self, criteria: FilterCriteria, cancel: threading.Event | None = None
    ) -> FilterResult:
        page_size = criteria.page_size if criteria.page_size is not None else self.config.default_page_size
        validate_filter_criteria(criteria, page_size, self.config.max_page_size)

        logger.info("Starting course filtering with criteria: %s", criteria.model_dump(exclude_none=True))
        predicate = translate_filter(criteria, self._related_departments(criteria))

        eligibility = None
        prereq = criteria.prerequisite_filter
        if prereq is not None and prereq.check_eligibility:
            candidates = self._query("filter_courses", predicate, 1, None, cancel)
            _check_cancelled(cancel, "filter_courses")
            results = evaluate_all(
                candidates.courses, prereq.completed_courses, self.config.scoring_concurrency
            )
            eligibility = _eligibility_out(results)
            eligible_ids = {r.course_id for r in results if r.is_eligible}
            predicate = all_of([predicate, course_ids_in(eligible_ids)])

        page = self._query("filter_courses", predicate, criteria.page_number, page_size, cancel)
        _check_cancelled(cancel, "filter_courses")

        logger.info("Course filtering completed. Found %d results", page.total)
        return FilterResult(
            courses=_courses_out(page.courses),
            total_count=page.total,
            page=page_metadata(criteria.page_number, page_size, page.total),
            eligibility_results=eligibility,
            applied_filters=self._applied_filters(criteria),
            filter_metadata=self._filter_metadata(criteria),
        )

    # ── Best-effort operations ────────────────────────────────────────────

    def get_search_suggestions(self, partial_input: str) -> list[str]:
        try:
            return suggest_prefix(self.catalog, partial_input)
        except Exception:
            logger.exception("Error generating search suggestions for input: %r", partial_input)
            return []

    def get_fuzzy_suggestions(self, term: str, threshold: float | None = None) -> list[FuzzyMatch]:
        if threshold is None:
            threshold = self.config.fuzzy_threshold
        try:
            matches = suggest_fuzzy(self.catalog, term, threshold, self.config.scoring_concurrency)
        except Exception:
            logger.exception("Error generating fuzzy suggestions for term: %r", term)
            return []
        return [
            FuzzyMatch(original_term=m.original_term, matched_term=m.matched_term, score=m.score)
            for m in matches
        ]

    def fuzzy_search(self, query: str, max_results: int | None = None) -> list[FuzzySearchResultItem]:
        if not query or not query.strip():
            return []
        if max_results is None:
            max_results = self.config.fuzzy_search_max_results
        if max_results <= 0:
            return []
        try:
            logger.info("Performing fuzzy search for query: %r", query)
            ranked = rank_courses(
                self.catalog,
                query,
                max_results,
                self.config.fuzzy_search_floor,
                self.config.scoring_concurrency,
            )
        except Exception:
            logger.exception("Error performing fuzzy search for query: %r", query)
            return []
        logger.info("Found %d fuzzy matches for query: %r", len(ranked), query)
        return [
            FuzzySearchResultItem(
                course=CourseResponse.model_validate(m.course, from_attributes=True),
                similarity_score=m.score,
                matched_fields=m.matched_fields,
            )
            for m in ranked
        ]

    # ── Helpers ───────────────────────────────────────────────────────────

    def _query(
        self,
        operation: str,
        predicate: Predicate,
        page_number: int,
        page_size: int | None,
        cancel: threading.Event | None,
    ) -> CatalogPage:
        _check_cancelled(cancel, operation)
        skip = 0 if page_size is None else (page_number - 1) * page_size
        try:
            return self.catalog.query(predicate, skip, page_size, cancel)
        except SearchCancelledError:
            logger.info("%s cancelled during catalog query", operation)
            raise
        except CatalogQueryError as exc:
            logger.error("Catalog query failed during %s: %s", operation, exc)
            raise CatalogQueryError(exc.message, operation=operation) from exc
        except SearchError:
            raise
        except Exception as exc:
            logger.error("Catalog query failed during %s: %s", operation, exc)
            raise CatalogQueryError(f"Catalog query failed: {exc}", operation=operation) from exc

    def _related_departments(self, criteria: FilterCriteria) -> set[str] | None:
        subject = criteria.subject_hierarchy
        if subject is None or not subject.include_related_subjects or not subject.subject_codes:
            return None
        codes = set(subject.subject_codes)
        try:
            subjects = self.catalog.subjects()
        except CatalogQueryError as exc:
            raise CatalogQueryError(exc.message, operation="filter_courses") from exc
        return {s.department_name for s in subjects if s.code in codes and s.department_name}

    @staticmethod
    def _applied_filters(criteria: FilterCriteria) -> dict[str, list[str]]:
        applied: dict[str, list[str]] = {}
        subject = criteria.subject_hierarchy
        if subject is not None:
            if subject.department_name:
                applied["department"] = [subject.department_name]
            if subject.subject_codes:
                applied["subject_codes"] = list(subject.subject_codes)
        level = criteria.academic_level
        if level is not None:
            bounds = [b.value for b in (level.min_level, level.max_level) if b is not None]
            if bounds:
                applied["academic_level"] = bounds
        if criteria.credit_hours is not None:
            credit = criteria.credit_hours
            applied["credit_hours"] = [credit.range] if credit.range else [
                str(credit.min_credits),
                str(credit.max_credits),
            ]
        if criteria.prerequisite_filter is not None and criteria.prerequisite_filter.check_eligibility:
            applied["prerequisites"] = ["eligible_only"]
        if criteria.schedule is not None and criteria.schedule.days_of_week:
            applied["days_of_week"] = list(criteria.schedule.days_of_week)
        if criteria.availability_only:
            applied["availability"] = ["open_seats"]
        return applied

    @staticmethod
    def _filter_metadata(criteria: FilterCriteria) -> dict:
        metadata: dict = {}
        subject = criteria.subject_hierarchy
        if subject is not None:
            metadata["subject_filter"] = {
                "department_name": subject.department_name,
                "subject_codes": subject.subject_codes,
                "include_related_subjects": subject.include_related_subjects,
            }
        metadata["filter_applied_at"] = datetime.now(timezone.utc).isoformat()
        return metadata
