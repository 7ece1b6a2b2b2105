"""Data models for the prompt template store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PromptTemplate(BaseModel):
    """A named prompt definition for one pipeline task.

    Serialized with camelCase keys (``systemPrompt``, ``userPromptTemplate``,
    ``outputFormat``) so exported files stay hand-editable; snake_case keys
    are accepted on import as well.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str = Field(..., min_length=1, description="Template identifier")
    name: str = Field(..., description="Human-readable template name")
    description: str = Field(default="", description="What the template is for")
    system_prompt: str = Field(..., description="System message content")
    user_prompt_template: str = Field(
        ..., description="User message with {placeholder} tokens"
    )
    output_format: str = Field(
        default="",
        description="Required output schema description appended to the user prompt",
        validation_alias=AliasChoices(
            "output_format", "outputFormat", "outputFormatDescription"
        ),
        serialization_alias="outputFormat",
    )
    examples: list[str] | None = Field(
        default=None, description="Optional worked examples"
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a camelCase dictionary."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PromptTemplate:
        """Deserialize from a dictionary (camelCase or snake_case keys)."""
        return cls.model_validate(data)


@dataclass(frozen=True)
class FilledPrompt:
    """System and user messages produced by filling a template."""

    system: str
    user: str

    def to_messages(self) -> list[dict[str, str]]:
        """Return the prompt as an ordered chat message list."""
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


@dataclass
class ImportReport:
    """Outcome of importing templates from text."""

    imported: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
