from __future__ import annotations
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Target(WireModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    display_name: str = Field("", alias="displayName")


class Goal(WireModel):
    id: str
    display_name: str = Field("", alias="displayName")
    color: Optional[str] = None


class PositionalMatch(WireModel):
    original_begin: int = Field(alias="originalBegin")
    original_end: int = Field(alias="originalEnd")
    original_text: str = Field(
        "", validation_alias=AliasChoices("originalPart", "originalText", "original_text")
    )


class Issue(WireModel):
    display_name_html: str = Field("", alias="displayNameHtml")
    guidance_html: str = Field("", alias="guidanceHtml")
    goal_id: Optional[str] = Field(None, alias="goalId")
    sub_issues: List[Issue] = Field(default_factory=list, alias="subIssues")
    positional_matches: List[PositionalMatch] = Field(default_factory=list, alias="positionalMatches")
    suggestions: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, raw: Any) -> Any:
        # the service nests matches under positionalInformation and sends
        # suggestions as objects carrying a "surface"
        if not isinstance(raw, dict):
            return raw
        raw = dict(raw)
        info = raw.pop("positionalInformation", None)
        if info and "positionalMatches" not in raw and "positional_matches" not in raw:
            raw["positionalMatches"] = info.get("matches") or []
        suggestions = raw.get("suggestions") or []
        raw["suggestions"] = [
            s.get("surface", "") if isinstance(s, dict) else s for s in suggestions
        ]
        return raw

    @field_validator("display_name_html", "guidance_html", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return "" if v is None else v


class ResultPayload(WireModel):
    score: int = 0
    goals: List[Goal] = Field(default_factory=list)
    issues: List[Issue] = Field(default_factory=list)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "ResultPayload":
        quality = data.get("quality") or {}
        return cls(
            score=int(quality.get("score") or 0),
            goals=data.get("goals") or [],
            issues=data.get("issues") or [],
        )


class CheckRange(BaseModel):
    """Host selection in 1-based editor positions, end exclusive."""
    begin: int
    end: int


# --- views returned by the bridge API ---

class EntryView(BaseModel):
    index: int
    name: str
    header: str
    label: str
    source_begin: int
    source_end: int
    start: Optional[int] = None
    end: Optional[int] = None
    suggestions: List[str]
    guidance: Optional[str] = None
    expanded: bool = False
    face: Optional[str] = None


class ScorecardView(BaseModel):
    doc_id: str
    target: Optional[str] = None
    score: int
    goals: List[str]
    entries: List[EntryView]
    text: str
