"""Expected-criteria models — discriminated union on the `kind` field."""

import re
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class ExactMatchCriteria(BaseModel, frozen=True):
    """The transcript must equal `expected` after whitespace normalization."""

    kind: Literal["exact"] = "exact"
    expected: str
    case_sensitive: bool = False


class SubstringCriteria(BaseModel, frozen=True):
    """Each expected substring found in the output earns an equal share of points.

    With require_all=False any single match earns full points.
    """

    kind: Literal["substring"] = "substring"
    expected: list[str] = Field(min_length=1)
    case_sensitive: bool = False
    require_all: bool = True


class RegexCriteria(BaseModel, frozen=True):
    """Full points when `pattern` matches anywhere in the output."""

    kind: Literal["regex"] = "regex"
    pattern: str = Field(min_length=1)
    ignore_case: bool = False
    multiline: bool = True

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, value: str) -> str:
        _compile_or_raise(value)
        return value


class RubricItem(BaseModel, frozen=True):
    """One weighted rubric line, satisfied when its pattern occurs in the output."""

    description: str = ""
    pattern: str = Field(min_length=1)
    regex: bool = False
    weight: float = Field(default=1.0, gt=0.0)

    @model_validator(mode="after")
    def _regex_pattern_compiles(self) -> "RubricItem":
        if self.regex:
            _compile_or_raise(self.pattern)
        return self


class RubricCriteria(BaseModel, frozen=True):
    """Points are the satisfied share of the total rubric weight."""

    kind: Literal["rubric"] = "rubric"
    items: list[RubricItem] = Field(min_length=1)
    case_sensitive: bool = False


# Pydantic selects the concrete criteria model from the `kind` field at fixture
# load time, so scoring never inspects raw dictionaries.
type Criteria = Annotated[
    ExactMatchCriteria | SubstringCriteria | RegexCriteria | RubricCriteria,
    Field(discriminator="kind"),
]

type CriteriaKind = Literal["exact", "substring", "regex", "rubric"]


def _compile_or_raise(pattern: str) -> None:
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
