"""Try-on orchestration: fan out prompt variants, fan in the images."""

import asyncio
import logging
from typing import Any

import httpx

from ..config import PipelineConfig
from ..errors import (
    GenerationError,
    MissingImageError,
    NoImageProducedError,
    TryOnError,
    UnknownError,
)
from ..models import EncodedImagePart, GenerationRequest, TryOnSession, UploadedImage
from ..prompts import build_prompt_variants
from ..services import GeminiClient, ServiceResponseError, normalize_pair

logger = logging.getLogger(__name__)


class TryOnPipeline:
    """Pipeline for generating try-on images from a subject and a garment photo.

    Flow:
    1. Normalize both uploads (concurrently)
    2. Issue one generation request per prompt variant (concurrently)
    3. Wait for every request, then collect all image parts in prompt order

    A single failed request fails the whole run; no partial results are
    returned.
    """

    def __init__(
        self,
        config: PipelineConfig,
        client: GeminiClient | None = None,
    ):
        self.config = config
        self.client = client or GeminiClient(
            config=config.gemini,
            api_key=config.gemini_api_key,
        )
        self.prompt_variants = build_prompt_variants(config.prompts)

    def build_requests(
        self,
        subject: EncodedImagePart,
        garment: EncodedImagePart,
    ) -> list[GenerationRequest]:
        """One request per prompt variant, images ordered (subject, garment)."""
        return [
            GenerationRequest(
                model=self.config.gemini.model,
                image_parts=(subject, garment),
                prompt=prompt,
            )
            for prompt in self.prompt_variants
        ]

    async def generate_tryon(
        self,
        subject: EncodedImagePart,
        garment: EncodedImagePart,
    ) -> list[str]:
        """Generate try-on images for every prompt variant.

        Args:
            subject: Encoded photo of the person
            garment: Encoded photo of the clothing item

        Returns:
            ``data:<mime>;base64,<data>`` URIs in prompt-variant order

        Raises:
            MissingImageError: if either image is missing
            GenerationError: if any request to the service fails
            NoImageProducedError: if no response contained an image
            UnknownError: for any other failure
        """
        if subject is None:
            raise MissingImageError("subject")
        if garment is None:
            raise MissingImageError("garment")

        try:
            requests = self.build_requests(subject, garment)
            logger.info(
                "Generating %d try-on variants with %s",
                len(requests), self.config.gemini.model,
            )

            # Wait for every request; siblings of a failed request are not cancelled.
            outcomes = await asyncio.gather(
                *(self._dispatch(i, request) for i, request in enumerate(requests)),
                return_exceptions=True,
            )

            for index, outcome in enumerate(outcomes):
                if isinstance(outcome, BaseException):
                    error = self._to_generation_error(index, len(requests), outcome)
                    if error is outcome:
                        raise error
                    raise error from outcome

            images: list[str] = []
            for index, response in enumerate(outcomes):
                try:
                    found = extract_image_uris(response)
                except ServiceResponseError as e:
                    raise GenerationError(str(e), variant_index=index) from e
                logger.info("Variant %d/%d returned %d image(s)", index + 1, len(requests), len(found))
                images.extend(found)

            if not images:
                raise NoImageProducedError()

            return images

        except TryOnError as e:
            logger.error("Try-on generation failed: %s", e.message)
            raise
        except Exception as e:
            logger.exception("Unexpected error during try-on generation")
            raise UnknownError() from e

    async def run(
        self,
        subject: UploadedImage,
        garment: UploadedImage,
        session: TryOnSession | None = None,
    ) -> TryOnSession:
        """Run one full try-on cycle and record it on the session.

        Raises:
            TryOnInProgressError: if the session already has a run outstanding
            TryOnError: any failure of the run, after it is recorded
        """
        session = session or TryOnSession()
        session.begin()
        return await self._complete(session, lambda: (subject, garment))

    async def run_from_base64(
        self,
        subject_photo_base64: str,
        garment_photo_base64: str,
        session: TryOnSession | None = None,
    ) -> list[str]:
        """Run try-on from base64 image data (data URL or bare base64).

        Decoding happens after the session has started, so a bad upload
        is recorded as the run's failure and clears earlier results.

        Returns:
            Generated image data URIs
        """
        def decode() -> tuple[UploadedImage, UploadedImage]:
            if not subject_photo_base64:
                raise MissingImageError("subject")
            if not garment_photo_base64:
                raise MissingImageError("garment")
            return (
                UploadedImage.from_data_url(subject_photo_base64, "subject"),
                UploadedImage.from_data_url(garment_photo_base64, "garment"),
            )

        session = session or TryOnSession()
        session.begin()
        session = await self._complete(session, decode)
        return session.images

    async def _complete(self, session: TryOnSession, load_images) -> TryOnSession:
        """Finish a begun run: load, normalize and generate, then record the outcome."""
        try:
            subject, garment = load_images()
            subject_part, garment_part = await normalize_pair(subject, garment)
            images = await self.generate_tryon(subject_part, garment_part)
        except TryOnError as e:
            session.fail(e)
            raise
        except Exception as e:
            logger.exception("Unexpected error during try-on run")
            error = UnknownError()
            session.fail(error)
            raise error from e

        session.succeed(images)
        logger.info("Try-on complete: %d image(s)", len(images))
        return session

    async def _dispatch(self, index: int, request: GenerationRequest) -> dict[str, Any]:
        logger.debug("Dispatching variant %d: %.60s...", index + 1, request.prompt)
        # Hard deadline for the whole request; httpx timeouts only bound each phase.
        return await asyncio.wait_for(
            self.client.generate_content(request),
            timeout=self.config.gemini.timeout,
        )

    def _to_generation_error(
        self,
        index: int,
        total: int,
        error: BaseException,
    ) -> TryOnError:
        """Map a failed request onto the error reported to the caller."""
        if isinstance(error, TryOnError):
            return error
        if not isinstance(error, Exception):
            raise error
        if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError)):
            cause = f"request timed out after {self.config.gemini.timeout:g}s"
        else:
            cause = str(error) or type(error).__name__

        logger.error("Variant %d/%d failed: %s", index + 1, total, cause)
        return GenerationError(cause, variant_index=index)


def extract_image_uris(response: dict[str, Any]) -> list[str]:
    """Collect image parts from the first candidate, in service order.

    Accepts both ``inlineData``/``mimeType`` and ``inline_data``/``mime_type``
    part shapes. Text and non-image parts are skipped.

    Raises:
        ServiceResponseError: if the response does not have the expected shape
    """
    if not isinstance(response, dict):
        raise ServiceResponseError("service returned a malformed response: body is not an object")

    candidates = _expect(response.get("candidates") or [], list, "candidates")
    if not candidates:
        return []

    candidate = _expect(candidates[0], dict, "candidate")
    content = _expect(candidate.get("content") or {}, dict, "content")
    uris = []
    for part in _expect(content.get("parts") or [], list, "parts"):
        part = _expect(part, dict, "part")
        inline = part.get("inlineData") or part.get("inline_data")
        if not inline:
            continue
        inline = _expect(inline, dict, "inline data")
        mime_type = _expect(inline.get("mimeType") or inline.get("mime_type") or "", str, "mime type")
        data = _expect(inline.get("data") or "", str, "image data")
        if not mime_type.startswith("image/"):
            logger.debug("Skipping non-image part (%s)", mime_type or "unknown")
        elif not data:
            logger.warning("Skipping %s part with no data", mime_type)
        else:
            uris.append(f"data:{mime_type};base64,{data}")
    return uris


def _expect(value: Any, kind: type, what: str) -> Any:
    if not isinstance(value, kind):
        raise ServiceResponseError(
            f"service returned a malformed response: {what} is {type(value).__name__}, "
            f"expected {kind.__name__}"
        )
    return value
