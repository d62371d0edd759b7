import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1

    @field_validator("sample_every")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("sample_every must be >= 1")
        return v


# ----------------- ENGINE ---------------------


class LimitsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    max_hops: int = 10_000  # edge crossings along one traversal branch
    max_results: int | None = None

    @field_validator("max_hops", "max_results")
    def _at_least_one(cls, v: int | None, info: ValidationInfo) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v


class EngineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    limits: LimitsModel = Field(default_factory=LimitsModel)


# ----------------- RECORD STORE ---------------------


class StoreByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    container: str | None = None  # slash path below the document root
    must_exist: bool = True

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))

    @model_validator(mode="after")
    def _check_exists(self):
        if self.must_exist and not os.path.isfile(self.file):
            raise ValueError(f"store file {self.file!r} does not exist")
        return self


class StoreInline(BaseModel):
    """PlanPro XML given as text (tests, small fixtures)."""

    model_config = ConfigDict(extra="forbid")
    by: Literal["inline"] = "inline"
    xml: str
    container: str | None = None


StoreRef = Annotated[StoreByPath | StoreInline, Field(discriminator="by")]


# ------------------------------------------------------------------


class RunModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "trackgeo"
    run_id: str = "local"
    store: StoreRef
    engine: EngineModel = Field(default_factory=EngineModel)
    log: LogModel = LogModel()
