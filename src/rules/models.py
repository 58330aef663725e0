from pydantic import BaseModel, Field, field_validator


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class RangeRule(BaseModel):
    min: int
    max: int


class ContentRules(BaseModel):
    title: RangeRule


class AuthorRules(BaseModel):
    unknown_label: str = "Unknown Author"

    @field_validator("unknown_label")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("unknown_label must not be blank")
        return v


class AuthRules(BaseModel):
    password_min_length: int = 8
    token_ttl_minutes: int = 60 * 24


class BootstrapAdminRules(BaseModel):
    enabled_if_no_admins: bool = True


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    bootstrap_admin: BootstrapAdminRules = Field(default_factory=BootstrapAdminRules)


class Rules(BaseModel):
    project: ProjectRules
    content: ContentRules
    authors: AuthorRules = Field(default_factory=AuthorRules)
    auth: AuthRules = Field(default_factory=AuthRules)
    ops: OpsRules = Field(default_factory=OpsRules)
