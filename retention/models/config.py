from dataclasses import field
from typing import Annotated, Any
from pydantic import Field, PositiveInt, field_validator
from pydantic.dataclasses import dataclass
from .rule import CredentialStr, NonEmptyStr, Rule

DEFAULT_LOG_FILE = "deletion_log.csv"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class NexusSettings:
    url: NonEmptyStr
    username: CredentialStr
    password: CredentialStr
    timeout: PositiveInt = DEFAULT_TIMEOUT

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@dataclass(frozen=True)
class RetentionConfig:
    nexus: NexusSettings
    rules: Annotated[list[Rule], Field(min_length=1)]
    protected_tags: frozenset[str] = field(default_factory=frozenset)
    schedule: str = ""
    dry_run: bool = False
    log_file: NonEmptyStr = DEFAULT_LOG_FILE

    @field_validator("protected_tags", mode="before")
    @classmethod
    def default_protected_tags(cls, value: Any) -> Any:
        return value or frozenset()

    @field_validator("schedule", mode="before")
    @classmethod
    def default_schedule(cls, value: Any) -> Any:
        return value or ""

    @field_validator("log_file", mode="before")
    @classmethod
    def default_log_file(cls, value: Any) -> Any:
        return value or DEFAULT_LOG_FILE

    def match_rule(self, image_name: str) -> Rule | None:
        # rules are evaluated in configured order, the first match wins
        return next((r for r in self.rules if r.matches(image_name)), None)

    def is_protected(self, tag: str) -> bool:
        return tag in self.protected_tags
