from pydantic import BaseModel, ConfigDict, Field, field_validator


def _unique_strings(values: list[str]) -> list[str]:
    seen = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


class TimelinePhase(BaseModel):
    """One step in the story of the change."""

    phase: str
    goal: str = ""
    changes: list[str] = Field(default_factory=list)

    @field_validator("phase", "goal")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("changes")
    @classmethod
    def _clean_changes(cls, values: list[str]) -> list[str]:
        return [v.strip() for v in values if v.strip()]


class EvidenceTrace(BaseModel):
    """Structured, evidence-grounded record of what a PR changed."""

    model_config = ConfigDict(populate_by_name=True)

    timeline: list[TimelinePhase] = Field(default_factory=list)
    modules_touched: list[str] = Field(default_factory=list, alias="modulesTouched")
    notable_patterns: list[str] = Field(default_factory=list, alias="notablePatterns")
    validated_changes: list[str] = Field(default_factory=list, alias="validatedChanges")

    @field_validator("modules_touched", "notable_patterns", "validated_changes")
    @classmethod
    def _dedupe(cls, values: list[str]) -> list[str]:
        return _unique_strings(values)

    @field_validator("timeline")
    @classmethod
    def _drop_empty_phases(cls, phases: list[TimelinePhase]) -> list[TimelinePhase]:
        return [p for p in phases if p.phase or p.changes]

    def is_degenerate(self) -> bool:
        return not (self.timeline and self.modules_touched and self.notable_patterns)

    def to_prompt_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
