"""API key endpoints — list, create and delete scoped keys of a server."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from typebridge.admin.forms import ApiKeysForm, FieldError, FieldSpec, Outcome, Severity
from typebridge.admin.keys import KeyAdministration, KeyRow
from typebridge.api.deps import get_key_admin
from typebridge.exceptions import TypesenseError

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateKeyRequest(BaseModel):
    description: str = Field(default="", description="Internal description")
    actions: str = Field(default="", description="Comma separated allowed actions")
    collections: str = Field(default="", description="Comma separated collection names or patterns")


class ValidationFailed(BaseModel):
    errors: list[FieldError]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=Outcome(message=message, severity=Severity.ERROR).model_dump(mode="json"),
    )


@router.get("/servers/{server_id}/keys", response_model=list[KeyRow], summary="List API Keys")
def list_keys(admin: KeyAdministration = Depends(get_key_admin)) -> list[KeyRow] | JSONResponse:
    try:
        return admin.rows()
    except TypesenseError as e:
        return _error(502, f"Could not list API keys: {e}")


@router.get("/servers/{server_id}/keys/form", response_model=FieldSpec, summary="API Keys Form")
def keys_form(admin: KeyAdministration = Depends(get_key_admin)) -> FieldSpec | JSONResponse:
    try:
        return ApiKeysForm(admin).render()
    except TypesenseError as e:
        return _error(502, f"Could not list API keys: {e}")


@router.post(
    "/servers/{server_id}/keys",
    response_model=Outcome,
    status_code=201,
    summary="Create API Key",
    description="The generated key is returned in this response only and can never be retrieved again.",
)
def create_key(
    body: CreateKeyRequest,
    admin: KeyAdministration = Depends(get_key_admin),
) -> Outcome | JSONResponse:
    form = ApiKeysForm(admin)
    values = body.model_dump()
    errors = form.validate(values)
    if errors:
        return JSONResponse(status_code=422, content=ValidationFailed(errors=errors).model_dump())
    try:
        return form.submit(values)
    except TypesenseError as e:
        return _error(502, f"Could not create API key: {e}")


@router.post(
    "/servers/{server_id}/keys/{key_id}/delete",
    name="key.delete",
    response_model=Outcome,
    summary="Delete API Key",
)
def delete_key(key_id: int, admin: KeyAdministration = Depends(get_key_admin)) -> Outcome | JSONResponse:
    try:
        admin.delete_key(key_id)
    except TypesenseError as e:
        logger.warning("Deleting API key %s failed: %s", key_id, e)
        return _error(502, f"Could not delete API key {key_id}: {e}")
    return Outcome(message=f"API key {key_id} has been deleted.", severity=Severity.STATUS)
