"""
Gemini API Client for Decade Restyle
Single remote boundary: sends one image part and one text part to the image model
"""

from typing import Optional, Tuple, Callable, Any

from google import genai
from google.genai import types

from .config_loader import Settings, load_settings, resolve_api_key
from .errors import ErrorClass, classify_remote_error, describe_remote_error
from .image_utils import decode_payload
from .models import GenerationRequest, ImagePayload


class GeminiClient:
    """Client for the Gemini image model, with the credential injected per call"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        api_key: Optional[str] = None,
        client_factory: Optional[Callable[..., Any]] = None
    ):
        if settings is None:
            settings, _ = load_settings()
        self.settings = settings
        self.api_key = api_key
        self.client_factory = client_factory or genai.Client
        self._status = "Not Configured"

    @property
    def model(self) -> str:
        return self.settings.model

    @property
    def status(self) -> str:
        """Get current client status"""
        return self._status

    def set_api_key(self, api_key: Optional[str]):
        """Set or clear the explicit API key (environment is used when cleared)"""
        self.api_key = api_key
        self._status = "Not Configured"

    def resolve_api_key(self) -> Optional[str]:
        """Current credential; re-read from the environment on every call"""
        return resolve_api_key(self.settings, self.api_key)

    def _create_image_part(self, image: ImagePayload):
        """Create an image part for the API request"""
        return types.Part.from_bytes(
            data=decode_payload(image),
            mime_type=image.mime_type
        )

    async def generate_content(self, request: GenerationRequest, api_key: str) -> types.GenerateContentResponse:
        """
        Issue one generation call

        A new SDK client is built for each call so the given credential is the
        one actually used; no session is shared between calls.

        Args:
            request: Image and prompt to send
            api_key: Credential resolved for this call

        Returns:
            Raw GenerateContentResponse, uninterpreted

        Raises:
            Whatever the SDK raises; classification is left to the caller
        """
        client = self.client_factory(api_key=api_key)
        return await client.aio.models.generate_content(
            model=self.settings.model,
            contents=[self._create_image_part(request.image), request.prompt_text],
            config=types.GenerateContentConfig(
                response_modalities=["IMAGE", "TEXT"]
            )
        )

    async def verify_api_key(self, api_key: Optional[str] = None) -> Tuple[bool, str]:
        """Verify an API key by making a cheap text request"""
        key = api_key or self.resolve_api_key()
        if not key:
            self._status = "No API Key"
            return False, "No API key provided"

        try:
            client = self.client_factory(api_key=key)
            response = await client.aio.models.generate_content(
                model=self.settings.verify_model,
                contents="Test"
            )
        except Exception as e:
            if classify_remote_error(e) is ErrorClass.TERMINAL:
                lowered = str(e).lower()
                if "quota" in lowered or "resource_exhausted" in lowered:
                    self._status = "Quota Exceeded"
                else:
                    self._status = "Invalid"
            else:
                self._status = "Error"
            return False, f"API key verification failed: {describe_remote_error(e)}"

        if response and response.text:
            self._status = "Valid"
            return True, "API key verified successfully"

        self._status = "Invalid Response"
        return False, "API key verification failed: empty response"
