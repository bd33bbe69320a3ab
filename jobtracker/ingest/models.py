from __future__ import annotations
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Wire names are camelCase (postedDate, totalResults); attributes stay snake_case.
_MODEL_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class JobListing(BaseModel):
    model_config = _MODEL_CONFIG

    title: str
    company: str
    location: str = ""
    url: str = ""  # detail page link with tracking query stripped
    posted_date: Optional[str] = None

    @field_validator("title", "company", "location", "url", mode="before")
    @classmethod
    def ensure_str(cls, v):
        if v is None:
            return ""
        return v


class SearchResult(BaseModel):
    model_config = _MODEL_CONFIG

    jobs: Tuple[JobListing, ...] = ()
    total_results: int = 0

    @model_validator(mode="after")
    def check_total(self):
        if self.total_results != len(self.jobs):
            raise ValueError(f"total_results={self.total_results} does not match {len(self.jobs)} jobs")
        return self

    @classmethod
    def from_jobs(cls, jobs: List[JobListing]) -> "SearchResult":
        return cls(jobs=tuple(jobs), total_results=len(jobs))


class PageState(str, Enum):
    READY = "ready"
    BLOCKED = "blocked"
    NOT_FOUND = "not_found"


class BlockingIndicators(BaseModel):
    model_config = ConfigDict(frozen=True)

    sign_in_markup: bool = False
    join_now_markup: bool = False
    sign_in_text: bool = False
    join_site_text: bool = False
    login_url: bool = False
    checkpoint_url: bool = False

    def any(self) -> bool:
        return any(self.model_dump().values())

    def triggered(self) -> List[str]:
        return [k for k, v in self.model_dump().items() if v]
