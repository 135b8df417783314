from pydantic import BaseModel, validator

RESOURCE_TYPE_QUERY = "Resources | where type =~ '{}'"
SUBSCRIPTION_FILTER_CLAUSE = " | where subscriptionId =~ '{}'"


def escape_kql_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


class ResourceTypeQuery(BaseModel):
    """Resource Graph query selecting every record of one resource type."""

    resource_type: str
    subscription_id: str | None = None

    class Config:
        frozen = True

    @validator("resource_type")
    def resource_type_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("resource type must not be blank")
        return value

    @validator("subscription_id")
    def blank_subscription_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def text(self) -> str:
        query = RESOURCE_TYPE_QUERY.format(escape_kql_string(self.resource_type))
        if self.subscription_id:
            query += SUBSCRIPTION_FILTER_CLAUSE.format(
                escape_kql_string(self.subscription_id)
            )
        return query
