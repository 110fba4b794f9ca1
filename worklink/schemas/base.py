from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python, ORM-readable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Location(APIModel):
    city: str
    state: str

    @field_validator("city", "state")
    @classmethod
    def strip_and_require(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v
