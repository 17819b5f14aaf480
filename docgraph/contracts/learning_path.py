"""Learning-path contracts (curated reading orders across topics)."""

from pydantic import BaseModel, ConfigDict, Field


class LearningPathStep(BaseModel):
    """One step of a learning path. Dynamic steps carry a note or problem instead."""

    model_config = ConfigDict(extra="ignore")

    phase: str | None = None
    topic: str | None = None
    depth: str | None = None
    note: str | None = None
    problem: str | None = None

    @property
    def is_dynamic(self) -> bool:
        return bool(self.note or self.problem)


class Milestone(BaseModel):
    model_config = ConfigDict(extra="ignore")

    steps: list[LearningPathStep] = Field(default_factory=list)


class LearningPath(BaseModel):
    """A learning path file. Steps may live at the top level or under milestones."""

    model_config = ConfigDict(extra="ignore")

    description: str | None = None
    category: str | None = None
    milestones: list[Milestone] = Field(default_factory=list)
    journey_steps: list[LearningPathStep] = Field(default_factory=list)
    steps: list[LearningPathStep] = Field(default_factory=list)

    def all_steps(self) -> list[LearningPathStep]:
        collected: list[LearningPathStep] = []
        for milestone in self.milestones:
            collected.extend(milestone.steps)
        collected.extend(self.journey_steps)
        collected.extend(self.steps)
        return collected
