import enum
from datetime import time
from typing import Any

from pydantic import BaseModel, Field

from coursefinder.models.course import CourseLevel
from coursefinder.schemas.course import CourseResponse


class SearchLevel(str, enum.Enum):
    """Level bucket inferred from the numeric suffix of a course number."""

    undergraduate = "undergraduate"
    graduate = "graduate"


class SearchField(str, enum.Enum):
    course_number = "course_number"
    title = "title"
    description = "description"
    subject_code = "subject_code"
    all = "all"


class SearchCriteria(BaseModel):
    subject_codes: list[str] | None = None
    min_credits: float | None = None
    max_credits: float | None = None
    level: SearchLevel | None = None
    keywords: list[str] | None = None
    search_fields: list[SearchField] | None = None
    instructor_name: str | None = None
    semester: str | None = None
    academic_year: int | None = None
    has_prerequisites: bool | None = None
    available_seats: bool | None = None
    page_number: int = 1
    page_size: int | None = None  # falls back to settings.default_page_size
    enable_fuzzy_search: bool = False
    fuzzy_search_threshold: float | None = None
    check_eligibility: bool = False
    completed_courses: list[str] | None = None


class SubjectFilter(BaseModel):
    department_name: str | None = None
    subject_codes: list[str] | None = None
    include_related_subjects: bool = False


class LevelFilter(BaseModel):
    min_level: CourseLevel | None = None
    max_level: CourseLevel | None = None


class CreditFilter(BaseModel):
    range: str = ""  # "3-4" or "3"
    min_credits: float = 0
    max_credits: float = 0


class PrerequisiteFilter(BaseModel):
    check_eligibility: bool = False
    student_id: int | None = None  # not consulted; eligibility reads completed_courses
    completed_courses: list[str] | None = None


class ScheduleFilter(BaseModel):
    start_time_after: time | None = None
    end_time_before: time | None = None
    days_of_week: list[str] | None = None  # M T W R F S U


class FilterCriteria(BaseModel):
    subject_hierarchy: SubjectFilter | None = None
    academic_level: LevelFilter | None = None
    credit_hours: CreditFilter | None = None
    prerequisite_filter: PrerequisiteFilter | None = None
    schedule: ScheduleFilter | None = None
    availability_only: bool = False
    page_number: int = 1
    page_size: int | None = None


class FuzzyMatch(BaseModel):
    original_term: str
    matched_term: str
    score: float = Field(..., ge=0.0, le=1.0)


class EligibilityResult(BaseModel):
    course_id: int
    is_eligible: bool
    prerequisite_status: str  # valid / invalid
    missing_requirements: list[str] = []


class PageMetadata(BaseModel):
    page_number: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class FilterSummary(BaseModel):
    total_courses: int
    subject_count: int
    avg_credit_hours: float


class SearchResult(BaseModel):
    courses: list[CourseResponse]
    total_count: int
    page: PageMetadata
    search_duration_ms: float
    filter_summary: FilterSummary
    suggestions: list[str] | None = None
    fuzzy_matches: list[FuzzyMatch] | None = None
    eligibility_results: list[EligibilityResult] | None = None


class FilterResult(BaseModel):
    courses: list[CourseResponse]
    total_count: int
    page: PageMetadata
    eligibility_results: list[EligibilityResult] | None = None
    applied_filters: dict[str, list[str]] = {}
    filter_metadata: dict[str, Any] = {}


class SuggestionResponse(BaseModel):
    query: str
    suggestions: list[str]


class FuzzySearchRequest(BaseModel):
    query: str
    max_results: int | None = Field(None, ge=1)


class FuzzySearchResultItem(BaseModel):
    course: CourseResponse
    similarity_score: float
    matched_fields: list[str] = []


class FuzzySearchResponse(BaseModel):
    query: str
    results: list[FuzzySearchResultItem]
