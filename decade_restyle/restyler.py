"""
Decade Restyle orchestration
Turns an uploaded photo plus a style prompt into a restyled image data URL

Pipeline:
1. Validate the data URL into an image payload (no remote call on failure)
2. Call Gemini through the retry executor
3. Interpret the reply
4. On a policy rejection, run one fallback cycle with a generic decade prompt
"""

from typing import Optional, Callable, Awaitable

from .config_loader import Settings
from .errors import (
    DecadeRestyleError,
    EmptyResponse,
    PolicyRejectedError,
    UnexpectedTextOnly,
)
from .fallback import FallbackController, should_fall_back
from .gemini_client import GeminiClient
from .image_utils import describe_payload, parse_image_data_url
from .logger import RunLogger
from .models import (
    Failure,
    FailureKind,
    GenerationOutcome,
    GenerationRequest,
    ImageOutcome,
    PolicyRejected,
)
from .prompt_loader import PromptLoader, get_prompt_loader
from .response_interpreter import interpret_response
from .retry import RetryExecutor


class DecadeRestyler:
    """
    Decade restyle generator

    Holds only configuration and collaborators; every call builds its own
    request and run logger, so concurrent calls need no coordination.
    """

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        settings: Optional[Settings] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        prompt_loader: Optional[PromptLoader] = None
    ):
        self.client = client or GeminiClient(settings=settings)
        self.executor = RetryExecutor(self.client, sleep=sleep)
        self.fallback = FallbackController(self.executor)
        self.prompt_loader = prompt_loader or get_prompt_loader()

    async def run(self, image_data_url: str, prompt_text: str, logger: RunLogger) -> GenerationOutcome:
        """Run the pipeline and return the final outcome without unwrapping it"""
        try:
            image = parse_image_data_url(image_data_url)
        except DecadeRestyleError as e:
            logger.set_outcome(e.kind, False, e.message)
            raise

        dimensions, size_bytes = describe_payload(image)
        logger.set_input_info(image.mime_type, dimensions, size_bytes, prompt_text)

        request = GenerationRequest(image=image, prompt_text=prompt_text)
        try:
            reply = await self.executor.execute(image, prompt_text, logger=logger, phase="primary")
            outcome = interpret_response(reply)
            if should_fall_back(outcome):
                outcome = await self.fallback.recover(request, outcome, logger=logger)
        except DecadeRestyleError as e:
            logger.set_outcome(e.kind, False, e.message)
            raise

        return outcome

    async def generate(
        self,
        image_data_url: str,
        prompt_text: str,
        logger: Optional[RunLogger] = None
    ) -> str:
        """
        Generate a decade-styled image

        Args:
            image_data_url: Uploaded photo as data:image/<type>;base64,<payload>
            prompt_text: Style prompt, normally naming a decade such as "1950s"
            logger: Optional run logger (a fresh one is created otherwise)

        Returns:
            The generated image as a data URL

        Raises:
            DecadeRestyleError subclass describing why no image was produced
        """
        logger = logger or RunLogger()
        outcome = await self.run(image_data_url, prompt_text, logger)
        return self._unwrap(outcome, logger)

    async def generate_for_decade(
        self,
        image_data_url: str,
        decade: str,
        logger: Optional[RunLogger] = None
    ) -> str:
        """Generate using the catalogue prompt for a decade"""
        logger = logger or RunLogger()
        try:
            prompt_text = self.prompt_loader.build_prompt(decade)
        except DecadeRestyleError as e:
            logger.set_outcome(e.kind, False, e.message)
            raise
        return await self.generate(image_data_url, prompt_text, logger=logger)

    def _unwrap(self, outcome: GenerationOutcome, logger: RunLogger) -> str:
        if isinstance(outcome, ImageOutcome):
            logger.set_outcome("Image", True)
            return outcome.data_url

        if isinstance(outcome, PolicyRejected):
            error = PolicyRejectedError(outcome.raw_text)
        elif isinstance(outcome, Failure) and outcome.kind is FailureKind.EMPTY_RESPONSE:
            error = EmptyResponse(outcome.message)
        else:
            error = UnexpectedTextOnly(outcome.message)

        logger.set_outcome(error.kind, False, error.message)
        raise error


_restyler: Optional[DecadeRestyler] = None


def get_restyler() -> DecadeRestyler:
    """Get or create the default restyler singleton"""
    global _restyler
    if _restyler is None:
        _restyler = DecadeRestyler()
    return _restyler


async def generate_image(image_data_url: str, prompt_text: str) -> str:
    """Generate a decade-styled image with the default settings"""
    return await get_restyler().generate(image_data_url, prompt_text)


async def generate_for_decade(image_data_url: str, decade: str) -> str:
    """Generate with the catalogue prompt for a decade, using the default settings"""
    return await get_restyler().generate_for_decade(image_data_url, decade)
