"""Generation result schemas — facade response, ephemeral result, archived record."""

from typing import Optional, Union

from pydantic import ConfigDict, Field

from selfintro.schemas.form import CamelModel, FormData

ProjectId = Union[str, int]


class GenerateResponse(CamelModel):
    """What the Dispatch Facade returns. Exactly one of content / error is meaningful."""

    content: str = ""
    prompt: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ProviderReply(CamelModel):
    """What a provider adapter returns on success."""

    content: str
    prompt: str


class GenerationResult(CamelModel):
    """Ephemeral result shuttled across one page transition. Replace-or-clear only."""

    model_config = ConfigDict(frozen=True)

    text: str
    prompt: str
    project_title: str = ""
    project_id: Optional[ProjectId] = None
    model_provider: str
    model_id: str
    estimated_tokens: int = 0
    estimated_cost: float = 0.0
    timestamp: int  # epoch milliseconds

    # Snapshot of the inputs, carried so the consuming page can archive it
    form_data: Optional[FormData] = None
    prompt_template: str = ""


class GenerationRecordDraft(CamelModel):
    """A generation record before the history store assigns id and timestamp."""

    model_config = ConfigDict(frozen=True)

    project_id: ProjectId = ""
    project_title: str = ""
    form_data: FormData = Field(default_factory=FormData)
    generated_text: str
    model_provider: str
    model_id: str
    estimated_tokens: int = 0
    estimated_cost: float = 0.0
    prompt_template: str = ""
    actual_prompt: str = ""


class GenerationRecord(GenerationRecordDraft):
    """Archived generation. Immutable after creation."""

    id: str
    timestamp: int  # epoch milliseconds
