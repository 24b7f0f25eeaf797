"""
Variant generation flow.

A variant moves requested -> processing -> completed | failed. Tokens are
checked up front without mutation and only debited once the provider has
returned an image and it has been stored; a failed generation costs nothing.
There is no automatic retry and no fallback provider.

Usage:
    service = StagingService(session, storage=get_storage())
    variant = await service.generate_variant(user.id, GenerateVariantCommand(...))
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from core.exceptions import (
    GenerationError,
    InsufficientTokensError,
    NotFoundError,
    ServiceUnavailableError,
    StorageError,
    ValidationError,
)
from database.models import Transformation, TransformationStatus
from database.repositories import (
    CatalogRepository,
    ImageRepository,
    ProfileRepository,
    ProjectRepository,
    TokenRepository,
    TransformationRepository,
)

from .ownership import ensure_owner
from .prompts import RoomDimensions, build_variant_prompt
from .providers import BaseStagingProvider, StagingRequest, get_provider
from .rate_limit import CooldownService
from .storage import StorageProvider
from .token_ledger import TokenLedger
from .uploads import build_result_key

logger = logging.getLogger(__name__)

_RESULT_EXTENSIONS = {"image/png": "png", "image/jpeg": "jpg", "image/webp": "webp"}


@dataclass
class GenerateVariantCommand:
    """Parameters of one generate-variant request."""

    base_image_id: UUID
    style_id: UUID | None
    room_type_id: UUID | None = None
    palette_id: UUID | None = None
    custom_prompt: str | None = None
    dimensions: RoomDimensions | None = None
    provider: str | None = None


class StagingService:
    """Runs the generate-variant flow inside one request session."""

    def __init__(
        self,
        session: AsyncSession,
        storage: StorageProvider,
        cooldowns: CooldownService | None = None,
    ):
        self.session = session
        self.storage = storage
        self.cooldowns = cooldowns or CooldownService()
        self.images = ImageRepository(session)
        self.profiles = ProfileRepository(session)
        self.projects = ProjectRepository(session)
        self.catalog = CatalogRepository(session)
        self.transformations = TransformationRepository(session)
        self.ledger = TokenLedger(TokenRepository(session))

    async def generate_variant(self, user_id: UUID, command: GenerateVariantCommand) -> Transformation:
        """
        Generate one variant of a base image.

        Raises:
            ValidationError: missing style or unknown provider
            NotFoundError / AuthorizationError: base image or catalog lookups
            InsufficientTokensError: balance too low, before or at debit time
            RateLimitError: generation cooldown still running
            GenerationError: provider or storage failure (nothing debited)
        """
        settings = get_settings()
        cost = settings.token_cost_per_generation

        if command.style_id is None:
            raise ValidationError("El estilo es requerido")

        image = ensure_owner(
            await self.images.get_room_image(command.base_image_id),
            user_id,
            "Imagen base no encontrada",
            "No tienes acceso a esta imagen",
        )

        if await self.profiles.get_by_id(user_id) is None:
            raise NotFoundError("Perfil no encontrado")

        style = await self.catalog.get_style(command.style_id)
        if style is None:
            raise NotFoundError("Estilo no encontrado")
        room_type = None
        if command.room_type_id:
            room_type = await self.catalog.get_room_type(command.room_type_id)
            if room_type is None:
                raise NotFoundError("Tipo de habitación no encontrado")
        palette = None
        if command.palette_id:
            palette = await self.catalog.get_palette(command.palette_id)
            if palette is None:
                raise NotFoundError("Paleta de colores no encontrada")

        provider = get_provider(command.provider or settings.default_provider)
        if not provider.is_available:
            raise ServiceUnavailableError(f"Proveedor {provider.name} no configurado")

        await self.ledger.ensure_available(user_id, cost)
        await self.cooldowns.generation(str(user_id))

        prompt = build_variant_prompt(
            style.base_prompt,
            room_type=room_type.name if room_type else None,
            palette=palette.name if palette else None,
            custom_prompt=command.custom_prompt,
            dimensions=command.dimensions,
        )

        variant = await self.transformations.create(
            user_id=user_id,
            project_id=image.project_id,
            base_image_id=image.id,
            style_id=style.id,
            room_type_id=room_type.id if room_type else None,
            palette_id=palette.id if palette else None,
            prompt_used=prompt,
            custom_instructions=command.custom_prompt,
            provider=provider.name,
        )
        variant.status = TransformationStatus.PROCESSING.value
        await self.session.commit()
        logger.info(f"Variant {variant.id} processing with {provider.name}")

        request = StagingRequest(
            prompt=prompt,
            image_data=b"",
            mime_type=image.content_type or "image/jpeg",
            style=style.name,
            room_type=room_type.name if room_type else None,
            palette=palette.name if palette else None,
            width=image.width,
            height=image.height,
        )

        started = time.monotonic()
        try:
            request.image_data = await self._load_source(image.storage_key, image.url)
            result_url, metadata = await self._run_provider(provider, request, user_id, variant.id)
        except (GenerationError, StorageError) as e:
            await self._fail(variant, e.details.get("reason") or e.message)
            raise GenerationError() from e
        except Exception as e:
            logger.exception(f"Unexpected error generating variant {variant.id}")
            await self._fail(variant, f"{type(e).__name__}: {e}")
            raise GenerationError() from e

        variant.result_image_url = result_url
        variant.processing_time_ms = int((time.monotonic() - started) * 1000)
        variant.generation_metadata = metadata

        try:
            await self.ledger.debit(
                user_id,
                cost,
                description=f"Transformación de diseño {style.name}",
                transformation_id=variant.id,
            )
        except InsufficientTokensError:
            await self._fail(variant, InsufficientTokensError.message)
            raise

        variant.status = TransformationStatus.COMPLETED.value
        variant.tokens_consumed = cost
        variant.completed_at = datetime.now(timezone.utc)
        await self.projects.increment_transformations(variant.project_id)
        await self.transformations.save(variant)
        await self.session.commit()

        logger.info(f"Variant {variant.id} completed in {variant.processing_time_ms}ms")
        return variant

    async def _load_source(self, storage_key: str | None, url: str) -> bytes:
        """Read the base image bytes from storage, or from its URL."""
        if storage_key:
            data = await self.storage.load(storage_key)
            if data is not None:
                return data

        if not url.startswith(("http://", "https://")):
            raise StorageError("Imagen base no disponible", details={"reason": "source image missing"})

        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            raise StorageError(details={"reason": f"source download failed: {e}"}) from e

    async def _run_provider(
        self,
        provider: BaseStagingProvider,
        request: StagingRequest,
        user_id: UUID,
        variant_id: UUID,
    ) -> tuple[str, dict]:
        """Call the provider once and store its image."""
        result = await provider.generate(request)
        if not result.success or not result.image_data:
            logger.error(
                f"Provider {provider.name} failed for variant {variant_id}: "
                f"{result.error} ({result.error_type})"
            )
            raise GenerationError(details={"reason": result.error or "no image returned"})

        extension = _RESULT_EXTENSIONS.get(result.mime_type, "png")
        stored = await self.storage.save(
            build_result_key(user_id, variant_id, extension),
            result.image_data,
            content_type=result.mime_type,
        )
        metadata = result.metadata.model_dump() if result.metadata else {"provider": provider.name}
        return stored.public_url or self.storage.get_public_url(stored.key), metadata

    async def _fail(self, variant: Transformation, reason: str) -> None:
        variant.status = TransformationStatus.FAILED.value
        variant.error_message = reason
        await self.transformations.save(variant)
        await self.session.commit()
        logger.warning(f"Variant {variant.id} failed: {reason}")
