"""NFT collection request schema (Pydantic models).

`CollectionParams` is the contract between the extraction service and the deploy action: model
output must validate against it or the request is rejected. `CollectionRequest` is the completed,
immutable command handed to the SDK.
"""

from __future__ import annotations

from typing import Any

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

DEFAULT_ROYALTY_BASIS_POINTS = 500
MAX_ROYALTY_BASIS_POINTS = 10_000

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


class Creator(BaseModel):
    """A creator share: wallet address plus percentage of royalties."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="ignore")

    address: str
    percentage: float = Field(ge=0, le=100)


class CollectionParams(BaseModel):
    """Collection parameters as extracted from a chat message.

    Optional fields stay `None` when the model did not supply them.
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="ignore",
        populate_by_name=True,
    )

    name: str = Field(min_length=1)
    uri: str
    royalty_basis_points: int | None = Field(
        default=None, ge=0, le=MAX_ROYALTY_BASIS_POINTS, alias="royaltyBasisPoints"
    )
    creators: tuple[Creator, ...] | None = None

    @field_validator("uri")
    @classmethod
    def validate_uri(cls, value: str) -> str:
        """Check URL syntax but keep the original string (no normalisation)."""

        try:
            _URL_ADAPTER.validate_python(value)
        except ValidationError as exc:
            raise ValueError("URI must be a valid URL") from exc
        return value


class CollectionRequest(BaseModel):
    """A fully validated collection deploy command."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    uri: str
    royalty_basis_points: int = Field(ge=0, le=MAX_ROYALTY_BASIS_POINTS, alias="royaltyBasisPoints")
    creators: tuple[Creator, ...] = Field(min_length=1)

    def to_payload(self) -> dict[str, Any]:
        """Wire form using the SDK's camelCase keys."""

        return self.model_dump(mode="json", by_alias=True)


def params_from_obj(obj: Any) -> CollectionParams:
    """Validate and parse collection parameters from an arbitrary decoded JSON object."""

    return CollectionParams.model_validate(obj)
