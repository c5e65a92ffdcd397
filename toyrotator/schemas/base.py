"""Base class for callable request payloads (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CallableRequest(BaseModel):
    """Argument object of a callable function."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    def provided(self, *exclude: str) -> dict:
        """Fields the caller actually sent, keyed by their stored camelCase name.

        Args:
            exclude: Python field names to leave out (e.g. the target document id)
        """
        return self.model_dump(by_alias=True, exclude_unset=True, exclude=set(exclude))
