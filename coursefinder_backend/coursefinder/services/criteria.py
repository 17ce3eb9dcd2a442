"""Turn search and filter requests into composable course predicates.

Every filter is a small function over a ``CourseRecord``; ``translate``
collects only the filters a request actually sets and folds them with AND.
Nothing here touches the catalog, so validation errors surface before any
query runs.
"""
from coursefinder.core.errors import CriteriaValidationError
from coursefinder.models.course import CourseLevel
from coursefinder.schemas.search import (
    CreditFilter,
    FilterCriteria,
    ScheduleFilter,
    SearchCriteria,
    SearchField,
    SearchLevel,
)
from coursefinder.services.catalog import CourseRecord, Predicate
from coursefinder.services.keywords import parse_keywords

_GRADUATE_FLOOR = 500
_WEEKDAYS = set("MTWRFSU")


def match_all(course: CourseRecord) -> bool:
    return True


def all_of(predicates: list[Predicate]) -> Predicate:
    if not predicates:
        return match_all
    if len(predicates) == 1:
        return predicates[0]

    def combined(course: CourseRecord) -> bool:
        return all(p(course) for p in predicates)

    return combined


# ── Level inference ───────────────────────────────────────────────────────────

def infer_level(course_number: str) -> SearchLevel | None:
    """Bucket a course by the integer value of its last three characters.

    Numbers shorter than three characters, or with a non-numeric suffix,
    belong to neither bucket.
    """
    if len(course_number) < 3:
        return None
    suffix = course_number[-3:]
    if not (suffix.isascii() and suffix.isdigit()):
        return None
    return SearchLevel.graduate if int(suffix) >= _GRADUATE_FLOOR else SearchLevel.undergraduate


# ── Individual filters ────────────────────────────────────────────────────────

def subject_in(codes: list[str]) -> Predicate:
    wanted = set(codes)
    return lambda course: course.subject_code in wanted


def credits_between(min_credits: float | None, max_credits: float | None) -> Predicate:
    def check(course: CourseRecord) -> bool:
        if min_credits is not None and course.credit_hours < min_credits:
            return False
        if max_credits is not None and course.credit_hours > max_credits:
            return False
        return True

    return check


def level_is(level: SearchLevel) -> Predicate:
    return lambda course: infer_level(course.course_number) == level


def _field_values(course: CourseRecord, fields: list[SearchField] | None) -> list[str]:
    if not fields or SearchField.all in fields:
        fields = [
            SearchField.course_number,
            SearchField.title,
            SearchField.description,
            SearchField.subject_code,
        ]
    values = []
    for f in fields:
        value = getattr(course, f.value)
        if value:
            values.append(value)
    return values


def keywords_match(keywords: list[str], fields: list[SearchField] | None = None) -> Predicate:
    """Case-sensitive substring match over the restricted field set.

    Each keyword entry is split by ``parse_keywords``: OR terms need any
    term to hit, AND terms need every term to hit. A course matches when
    any entry matches.
    """
    groups = [parse_keywords(k) for k in keywords if k and k.strip()]
    groups = [g for g in groups if not g.is_empty]

    def check(course: CourseRecord) -> bool:
        values = _field_values(course, fields)

        def hit(term: str) -> bool:
            return any(term in v for v in values)

        for group in groups:
            if group.or_terms and any(hit(t) for t in group.or_terms):
                return True
            if group.and_terms and all(hit(t) for t in group.and_terms):
                return True
        return False

    return check if groups else match_all


def instructor_contains(name: str) -> Predicate:
    return lambda course: any(
        o.instructor_name is not None and name in o.instructor_name for o in course.offerings
    )


def offered_in(semester: str | None, year: int | None) -> Predicate:
    return lambda course: any(
        (not semester or o.term == semester) and (year is None or o.year == year)
        for o in course.offerings
    )


def has_prerequisites(flag: bool) -> Predicate:
    return lambda course: bool(course.prerequisites) == flag


def has_open_seats(course: CourseRecord) -> bool:
    return any(o.has_open_seats for o in course.offerings)


def department_is(name: str) -> Predicate:
    return lambda course: course.department_name == name


def department_in(names: set[str]) -> Predicate:
    return lambda course: course.department_name in names


def declared_level_between(min_level: CourseLevel | None, max_level: CourseLevel | None) -> Predicate:
    def check(course: CourseRecord) -> bool:
        if min_level is not None and course.level.rank < min_level.rank:
            return False
        if max_level is not None and course.level.rank > max_level.rank:
            return False
        return True

    return check


def course_ids_in(ids: set[int]) -> Predicate:
    return lambda course: course.id in ids


def meets_schedule(schedule: ScheduleFilter) -> Predicate:
    days = set(schedule.days_of_week or [])

    def offering_fits(o) -> bool:
        if o.start_time is None or o.end_time is None:
            return False
        if schedule.start_time_after is not None and o.start_time < schedule.start_time_after:
            return False
        if schedule.end_time_before is not None and o.end_time > schedule.end_time_before:
            return False
        if days and (not o.days or not set(o.days) <= days):
            return False
        return True

    return lambda course: any(offering_fits(o) for o in course.offerings)


# ── Validation ────────────────────────────────────────────────────────────────

def validate_paging(operation: str, page_number: int, page_size: int, max_page_size: int) -> None:
    if page_number < 1:
        raise CriteriaValidationError(
            "page_number must be at least 1.", operation=operation, field="page_number"
        )
    if page_size < 1 or page_size > max_page_size:
        raise CriteriaValidationError(
            f"page_size must be between 1 and {max_page_size}.",
            operation=operation,
            field="page_size",
        )


def _validate_credit_bounds(operation: str, low: float | None, high: float | None) -> None:
    for name, value in (("min_credits", low), ("max_credits", high)):
        if value is not None and value < 0:
            raise CriteriaValidationError(
                f"{name} cannot be negative.", operation=operation, field=name
            )
    if low is not None and high is not None and low > high:
        raise CriteriaValidationError(
            "min_credits cannot exceed max_credits.", operation=operation, field="min_credits"
        )


def validate_search_criteria(criteria: SearchCriteria, page_size: int, max_page_size: int) -> None:
    operation = "search_courses"
    validate_paging(operation, criteria.page_number, page_size, max_page_size)
    _validate_credit_bounds(operation, criteria.min_credits, criteria.max_credits)
    threshold = criteria.fuzzy_search_threshold
    if threshold is not None and not 0.0 <= threshold <= 1.0:
        raise CriteriaValidationError(
            "fuzzy_search_threshold must be within [0, 1].",
            operation=operation,
            field="fuzzy_search_threshold",
        )


def resolve_credit_filter(credit: CreditFilter) -> tuple[float | None, float | None]:
    """Bounds from a credit filter; zero means unset, ``range`` fills unset bounds."""
    low = credit.min_credits if credit.min_credits > 0 else None
    high = credit.max_credits if credit.max_credits > 0 else None
    text = credit.range.strip()
    if text and (low is None or high is None):
        parts = [p.strip() for p in text.split("-")]
        try:
            bounds = [float(p) for p in parts]
        except ValueError:
            bounds = []
        if len(bounds) not in (1, 2):
            raise CriteriaValidationError(
                f"Invalid credit range {credit.range!r}.",
                operation="filter_courses",
                field="credit_hours.range",
            )
        if low is None:
            low = bounds[0]
        if high is None:
            high = bounds[-1]
    _validate_credit_bounds("filter_courses", low, high)
    return low, high


def validate_schedule(schedule: ScheduleFilter) -> None:
    for day in schedule.days_of_week or []:
        if day not in _WEEKDAYS:
            raise CriteriaValidationError(
                f"Unknown day {day!r}; expected one of M T W R F S U.",
                operation="filter_courses",
                field="schedule.days_of_week",
            )
    start, end = schedule.start_time_after, schedule.end_time_before
    if start is not None and end is not None and start > end:
        raise CriteriaValidationError(
            "start_time_after cannot be later than end_time_before.",
            operation="filter_courses",
            field="schedule.start_time_after",
        )


def validate_filter_criteria(criteria: FilterCriteria, page_size: int, max_page_size: int) -> None:
    validate_paging("filter_courses", criteria.page_number, page_size, max_page_size)
    if criteria.credit_hours is not None:
        resolve_credit_filter(criteria.credit_hours)
    if criteria.schedule is not None:
        validate_schedule(criteria.schedule)


# ── Translation ───────────────────────────────────────────────────────────────

def translate(criteria: SearchCriteria) -> Predicate:
    predicates: list[Predicate] = []

    if criteria.subject_codes:
        predicates.append(subject_in(criteria.subject_codes))
    if criteria.min_credits is not None or criteria.max_credits is not None:
        predicates.append(credits_between(criteria.min_credits, criteria.max_credits))
    if criteria.level is not None:
        predicates.append(level_is(criteria.level))
    if criteria.keywords:
        predicates.append(keywords_match(criteria.keywords, criteria.search_fields))
    if criteria.instructor_name and criteria.instructor_name.strip():
        predicates.append(instructor_contains(criteria.instructor_name))
    if (criteria.semester and criteria.semester.strip()) or criteria.academic_year is not None:
        predicates.append(offered_in(criteria.semester, criteria.academic_year))
    if criteria.has_prerequisites is not None:
        predicates.append(has_prerequisites(criteria.has_prerequisites))
    if criteria.available_seats:
        predicates.append(has_open_seats)

    return all_of(predicates)


def translate_filter(
    criteria: FilterCriteria,
    related_departments: set[str] | None = None,
) -> Predicate:
    """Predicate for every filter-hierarchy branch except eligibility.

    ``related_departments`` is the set of departments owning the requested
    subject codes, needed only when related subjects are included.
    """
    predicates: list[Predicate] = []

    subject = criteria.subject_hierarchy
    if subject is not None:
        if subject.department_name and subject.department_name.strip():
            predicates.append(department_is(subject.department_name))
        if subject.include_related_subjects and subject.subject_codes:
            predicates.append(department_in(related_departments or set()))
        elif subject.subject_codes:
            predicates.append(subject_in(subject.subject_codes))

    level = criteria.academic_level
    if level is not None and (level.min_level is not None or level.max_level is not None):
        predicates.append(declared_level_between(level.min_level, level.max_level))

    if criteria.credit_hours is not None:
        low, high = resolve_credit_filter(criteria.credit_hours)
        if low is not None or high is not None:
            predicates.append(credits_between(low, high))

    if criteria.schedule is not None:
        validate_schedule(criteria.schedule)
        sched = criteria.schedule
        if (
            sched.start_time_after is not None
            or sched.end_time_before is not None
            or sched.days_of_week
        ):
            predicates.append(meets_schedule(sched))

    if criteria.availability_only:
        predicates.append(has_open_seats)

    return all_of(predicates)
