from dataclasses import dataclass, field

_OR = " OR "
_AND = " AND "
_QUOTES = "\"'"


@dataclass
class KeywordTerms:
    and_terms: list[str] = field(default_factory=list)
    or_terms: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.and_terms and not self.or_terms


def _clean(term: str) -> str:
    return term.strip().strip(_QUOTES)


def parse_keywords(raw: str) -> KeywordTerms:
    """Split free text on a literal `` OR `` or `` AND `` delimiter.

    Only one grouping is recognised per call and OR wins when both appear,
    so ``"a AND b OR c"`` yields the OR terms ``["a AND b", "c"]``.
    """
    if _OR in raw:
        return KeywordTerms(or_terms=[t for t in (_clean(p) for p in raw.split(_OR)) if t])
    if _AND in raw:
        return KeywordTerms(and_terms=[t for t in (_clean(p) for p in raw.split(_AND)) if t])
    term = _clean(raw)
    return KeywordTerms(and_terms=[term] if term else [])
