from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from coursefinder.core.database import get_db
from coursefinder.core.errors import (
    CatalogQueryError,
    CriteriaValidationError,
    SearchCancelledError,
    SearchError,
)
from coursefinder.schemas.search import (
    FilterCriteria,
    FilterResult,
    FuzzyMatch,
    FuzzySearchRequest,
    FuzzySearchResponse,
    SearchCriteria,
    SearchResult,
    SuggestionResponse,
)
from coursefinder.services.catalog import SqlCourseCatalog
from coursefinder.services.search import CourseSearchService

router = APIRouter(prefix="/api")

_STATUS_BY_ERROR = {
    CriteriaValidationError: 422,
    CatalogQueryError: 502,
    SearchCancelledError: 409,
}


def get_search_service(db: Session = Depends(get_db)) -> CourseSearchService:
    return CourseSearchService(SqlCourseCatalog(db))


def _http_error(exc: SearchError) -> HTTPException:
    status = _STATUS_BY_ERROR.get(type(exc), 500)
    return HTTPException(status_code=status, detail=exc.to_dict())


@router.post("/courses/search", response_model=SearchResult)
def search_courses_endpoint(
    payload: SearchCriteria,
    service: CourseSearchService = Depends(get_search_service),
):
    try:
        return service.search_courses(payload)
    except SearchError as exc:
        raise _http_error(exc) from exc


@router.post("/courses/search/fuzzy", response_model=FuzzySearchResponse)
def fuzzy_search_endpoint(
    payload: FuzzySearchRequest,
    service: CourseSearchService = Depends(get_search_service),
):
    if not payload.query.strip():
        raise HTTPException(status_code=422, detail="Search query is required.")
    results = service.fuzzy_search(payload.query, payload.max_results)
    return FuzzySearchResponse(query=payload.query, results=results)


@router.post("/courses/filter", response_model=FilterResult)
def filter_courses_endpoint(
    payload: FilterCriteria,
    service: CourseSearchService = Depends(get_search_service),
):
    try:
        return service.filter_courses(payload)
    except SearchError as exc:
        raise _http_error(exc) from exc


@router.get("/courses/suggestions", response_model=SuggestionResponse)
def suggestions_endpoint(
    q: str = Query("", description="Partial title, subject or instructor name"),
    service: CourseSearchService = Depends(get_search_service),
):
    return SuggestionResponse(query=q, suggestions=service.get_search_suggestions(q))


@router.get("/courses/suggestions/fuzzy", response_model=list[FuzzyMatch])
def fuzzy_suggestions_endpoint(
    term: str,
    threshold: float | None = Query(None, ge=0.0, le=1.0),
    service: CourseSearchService = Depends(get_search_service),
):
    return service.get_fuzzy_suggestions(term, threshold)
