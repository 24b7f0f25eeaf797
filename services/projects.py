"""
Project workspace operations: field rules and base image uploads and removal.
"""

import logging
from typing import Any
from uuid import UUID

from core.exceptions import StorageError, ValidationError
from database.models import Image, Project, ProjectStatus
from database.repositories import ImageRepository, ProjectRepository

from .ownership import ensure_owner
from .storage import StorageProvider
from .uploads import prepare_upload, store_upload

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100

PROJECT_NOT_FOUND = "Proyecto no encontrado"
PROJECT_FORBIDDEN = "No autorizado para este proyecto"
IMAGE_NOT_FOUND = "Imagen no encontrada"
IMAGE_FORBIDDEN = "No tienes permisos para esta imagen"


def clean_name(name: str | None) -> str:
    """Trimmed project name, or ValidationError."""
    if not name or not name.strip():
        raise ValidationError("El nombre del proyecto es requerido")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError("El nombre del proyecto no puede exceder 100 caracteres")
    return name.strip()


def clean_description(description: str | None) -> str | None:
    if description is None:
        return None
    return description.strip() or None


def build_project_updates(fields: dict[str, Any]) -> dict[str, Any]:
    """
    Validate a partial update. Only keys present in ``fields`` are returned.

    Raises:
        ValidationError: empty or too long name, unknown status
    """
    updates: dict[str, Any] = {}

    if "name" in fields:
        updates["name"] = clean_name(fields["name"])
    if "description" in fields:
        updates["description"] = clean_description(fields["description"])
    if "status" in fields:
        status = fields["status"]
        if status not in {s.value for s in ProjectStatus}:
            raise ValidationError("Estado de proyecto inválido")
        updates["status"] = status
    if "is_public" in fields and fields["is_public"] is not None:
        updates["is_public"] = bool(fields["is_public"])

    return updates


async def get_owned_project(projects: ProjectRepository, project_id: UUID, user_id: UUID) -> Project:
    return ensure_owner(
        await projects.get_by_id(project_id),
        user_id,
        PROJECT_NOT_FOUND,
        PROJECT_FORBIDDEN,
    )


async def upload_base_image(
    projects: ProjectRepository,
    images: ImageRepository,
    storage: StorageProvider,
    user_id: UUID,
    project_id: UUID,
    data: bytes,
    content_type: str | None,
    filename: str | None = None,
    name: str | None = None,
) -> Image:
    """
    Store an uploaded room photo and record it on the project.

    The first image of a project becomes its primary image.
    """
    project = await get_owned_project(projects, project_id, user_id)

    if not data:
        raise ValidationError("No se proporcionó archivo")

    upload = prepare_upload(data, content_type)
    storage_key, url = await store_upload(storage, user_id, project.id, upload)

    count = await images.count_by_project(project.id)
    default_name = filename.rsplit(".", 1)[0] if filename else None
    try:
        image = await images.create(
            project_id=project.id,
            user_id=user_id,
            url=url,
            storage_key=storage_key,
            name=name or default_name,
            width=upload.width,
            height=upload.height,
            size_bytes=len(upload.data),
            content_type=upload.content_type,
            upload_order=count + 1,
            is_primary=count == 0,
        )
    except Exception as e:
        logger.error(f"Could not record upload {storage_key}, removing stored file: {e}")
        await storage.delete(storage_key)
        raise StorageError("Error al guardar información de la imagen") from e

    if count == 0 and not project.cover_image_url:
        await projects.update(project, cover_image_url=url)
    else:
        await projects.touch(project.id)

    logger.info(f"Uploaded base image {image.id} to project {project.id}")
    return image


async def get_owned_image(images: ImageRepository, image_id: UUID, user_id: UUID) -> Image:
    return ensure_owner(
        await images.get_by_id(image_id),
        user_id,
        IMAGE_NOT_FOUND,
        IMAGE_FORBIDDEN,
    )


async def delete_image(
    projects: ProjectRepository,
    images: ImageRepository,
    storage: StorageProvider,
    image_id: UUID,
    user_id: UUID,
) -> None:
    """
    Remove an image, its stored file and the variants generated from it.

    The stored file goes first; if that fails nothing is deleted.
    """
    image = await get_owned_image(images, image_id, user_id)

    if image.storage_key:
        try:
            await storage.delete(image.storage_key)
        except (StorageError, OSError) as e:
            logger.error(f"Could not delete stored file for image {image.id}: {e}")
            raise StorageError("Error al eliminar la imagen") from e

    project = await projects.get_by_id(image.project_id)
    await images.delete(image)
    if project is not None and project.cover_image_url == image.url:
        await projects.update(project, cover_image_url=None)

    logger.info(f"Deleted image {image.id} from project {image.project_id}")
