"""Collection request validation pipeline.

Turns a chat message into a `CollectionRequest`:

    1) reject messages with neither text nor source,
    2) ask the extraction service for a JSON candidate (one call, no retry),
    3) validate the candidate against `CollectionParams`,
    4) pre-check the metadata URI, falling back to the configured default,
    5) fill royalty and creator defaults.

Every outcome is returned as a `ValidationResult`; no exception leaves `validate_collection_request`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from solana_plugin.collection.errors import (
    CollectionRequestError,
    CollectionValidationError,
    EmptyInputError,
)
from solana_plugin.collection.llm_extractor import (
    CandidateExtractor,
    LLMExtractionError,
    render_collection_prompt,
)
from solana_plugin.collection.metadata import MetadataChecker, resolve_metadata_uri
from solana_plugin.collection.schema import (
    DEFAULT_ROYALTY_BASIS_POINTS,
    CollectionParams,
    CollectionRequest,
    Creator,
    params_from_obj,
)
from solana_plugin.config.settings import RuntimeSettings
from solana_plugin.runtime.types import Memory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Tagged outcome of request validation."""

    success: bool
    request: CollectionRequest | None = None
    text: str = ""
    error: dict[str, Any] | None = None

    @classmethod
    def ok(cls, request: CollectionRequest) -> ValidationResult:
        return cls(success=True, request=request, text=f'Validated collection "{request.name}"')

    @classmethod
    def failed(cls, text: str, *, kind: str, message: str, field: str | None = None) -> ValidationResult:
        return cls(success=False, text=text, error={"error": message, "kind": kind, "field": field})


def _first_error_field(exc: ValidationError) -> str | None:
    errors = exc.errors()
    if not errors:
        return None
    loc = errors[0].get("loc") or ()
    return ".".join(str(part) for part in loc) or None


def apply_defaults(params: CollectionParams, *, uri: str, wallet_address: str | None) -> CollectionRequest:
    """Complete validated params into a `CollectionRequest`.

    Values supplied by the model always win; defaults only fill fields that are still missing.
    """

    creators = params.creators
    if not creators:
        if not wallet_address:
            raise CollectionValidationError(
                "creators are missing and no wallet address is configured", field="creators"
            )
        creators = (Creator(address=wallet_address, percentage=100),)

    royalty = params.royalty_basis_points
    if royalty is None:
        royalty = DEFAULT_ROYALTY_BASIS_POINTS

    return CollectionRequest(
        name=params.name,
        uri=uri,
        royalty_basis_points=royalty,
        creators=creators,
    )


async def validate_collection_request(
        message: Memory,
        *,
        settings: RuntimeSettings,
        extractor: CandidateExtractor,
        metadata_checker: MetadataChecker,
        wallet_address: str | None,
) -> ValidationResult:
    """Validate a chat message into a `CollectionRequest` (see module docstring)."""

    content = message.content
    try:
        if not content.text and not content.source:
            raise EmptyInputError("Empty message content")

        prompt = render_collection_prompt(
            content.text or "",
            default_uri=settings.default_nft_metadata_uri,
            wallet_address=wallet_address,
        )
        candidate = await asyncio.to_thread(extractor.extract, prompt)

        try:
            params = params_from_obj(candidate)
        except ValidationError as exc:
            field = _first_error_field(exc)
            raise CollectionValidationError(
                f"Invalid collection parameters: {field or 'input'}", field=field
            ) from exc

        uri = await asyncio.to_thread(
            resolve_metadata_uri,
            params.uri,
            default_uri=settings.default_nft_metadata_uri,
            checker=metadata_checker,
        )
        request = apply_defaults(params, uri=uri, wallet_address=wallet_address)
    except EmptyInputError as exc:
        logger.error("empty message content user_id=%s room_id=%s", message.user_id, message.room_id)
        return ValidationResult.failed(
            "Cannot process empty message content", kind=exc.kind, message=str(exc)
        )
    except CollectionRequestError as exc:
        logger.info("collection request rejected kind=%s field=%s", exc.kind, exc.field)
        return ValidationResult.failed(
            f"Failed to deploy collection: {exc}", kind=exc.kind, message=str(exc), field=exc.field
        )
    except LLMExtractionError as exc:
        logger.warning("collection extraction failed reason=%s", exc)
        return ValidationResult.failed(
            f"Failed to deploy collection: {exc}", kind="extraction_error", message=str(exc)
        )

    logger.info(
        "collection request validated name=%s royalty_bps=%d creators=%d",
        request.name,
        request.royalty_basis_points,
        len(request.creators),
    )
    return ValidationResult.ok(request)
