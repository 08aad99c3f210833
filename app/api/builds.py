import json
import logging
import re

from fastapi import APIRouter, Depends, Query, Request
from starlette.datastructures import UploadFile

from app.bot.formatting import format_build_message
from app.config import get_settings
from app.deps import get_storage, require_login
from app.errors import BuildValidationError, ConflictError, NotFoundError
from app.schemas.build import BuildOut
from app.services.uploads import delete_image, save_image
from app.services.validation import validate_build_input, validate_build_update
from app.storage import Storage
from app.storage.base import ALIAS_IN_USE

logger = logging.getLogger(__name__)

router = APIRouter()

_ID_RE = re.compile(r"[0-9]+")


def _parse_build_id(raw: str) -> int:
    if not _ID_RE.fullmatch(raw) or int(raw) < 1:
        raise BuildValidationError(
            [{"field": "id", "message": "Invalid ID format"}], "Invalid ID format"
        )
    return int(raw)


def _get_or_404(storage: Storage, build_id: int) -> BuildOut:
    build = storage.get_build(build_id)
    if build is None:
        raise NotFoundError("Build not found")
    return build


def _loads(raw) -> object:
    if not isinstance(raw, str):
        raise BuildValidationError([{"field": "data", "message": "Expected a JSON string"}])
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise BuildValidationError([{"field": "data", "message": "Invalid JSON"}]) from exc


async def _read_payload(request: Request) -> tuple[object, UploadFile | None]:
    """Build data from a JSON body, or from the ``data`` field of a multipart
    form with an optional ``image`` file."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        image = form.get("image")
        if not isinstance(image, UploadFile) or not image.filename:
            image = None
        raw = form.get("data")
        return (_loads(raw) if raw is not None else {}), image

    try:
        return await request.json(), None
    except ValueError as exc:
        raise BuildValidationError([{"field": "body", "message": "Invalid JSON"}]) from exc


@router.get("", response_model=list[BuildOut])
async def list_builds(
    activity_type: str | None = Query(None, alias="activityType"),
    storage: Storage = Depends(get_storage),
):
    """List builds, optionally filtered by exact activity type."""
    if activity_type:
        return storage.get_builds_by_activity_type(activity_type)
    return storage.get_builds()


@router.get("/{build_id}", response_model=BuildOut)
async def get_build(build_id: str, storage: Storage = Depends(get_storage)):
    return _get_or_404(storage, _parse_build_id(build_id))


@router.get("/{build_id}/message")
async def get_build_message(build_id: str, storage: Storage = Depends(get_storage)):
    """The chat embed the bot would send for this build."""
    build = _get_or_404(storage, _parse_build_id(build_id))
    return format_build_message(build, get_settings().PUBLIC_URL)


@router.post("", status_code=201, response_model=BuildOut)
async def create_build(
    request: Request,
    user=Depends(require_login),
    storage: Storage = Depends(get_storage),
):
    payload, image = await _read_payload(request)
    data = validate_build_input(payload)
    if storage.get_build_by_alias(data.command_alias):
        raise ConflictError(ALIAS_IN_USE)

    if image:
        data.img_url = await save_image(image)
    try:
        build = storage.create_build(data)
    except Exception:
        if image:
            delete_image(data.img_url)
        raise

    logger.info("Created build %s (%s)", build.id, build.command_alias)
    return build


@router.put("/{build_id}", response_model=BuildOut)
async def update_build(
    build_id: str,
    request: Request,
    user=Depends(require_login),
    storage: Storage = Depends(get_storage),
):
    build_id = _parse_build_id(build_id)
    existing = _get_or_404(storage, build_id)

    payload, image = await _read_payload(request)
    data = validate_build_update(payload)
    alias = data.command_alias
    if alias and alias != existing.command_alias and storage.get_build_by_alias(alias):
        raise ConflictError(ALIAS_IN_USE)

    if image:
        data.img_url = await save_image(image)
    try:
        build = storage.update_build(build_id, data)
    except Exception:
        if image:
            delete_image(data.img_url)
        raise
    if build is None:
        if image:
            delete_image(data.img_url)
        raise NotFoundError("Build not found")
    if image:
        delete_image(existing.img_url)

    logger.info("Updated build %s (%s)", build.id, ", ".join(sorted(data.model_fields_set)))
    return build


@router.delete("/{build_id}")
async def delete_build(
    build_id: str,
    user=Depends(require_login),
    storage: Storage = Depends(get_storage),
):
    build_id = _parse_build_id(build_id)
    existing = _get_or_404(storage, build_id)
    if not storage.delete_build(build_id):
        raise NotFoundError("Build not found")
    delete_image(existing.img_url)

    logger.info("Deleted build %s (%s)", build_id, existing.command_alias)
    return {"message": "Build deleted successfully"}
