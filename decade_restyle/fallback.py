"""
Fallback controller for Decade Restyle
Re-targets a policy-rejected request with a more generic prompt for the same decade
"""

import re
from typing import Optional

from .config_loader import DEFAULT_FALLBACK_TEMPLATE
from .logger import RunLogger
from .models import Failure, FailureKind, GenerationOutcome, GenerationRequest, PolicyRejected
from .response_interpreter import interpret_response
from .retry import RetryExecutor

DECADE_PATTERN = re.compile(r"(\d{4}s)")

TEXT_ONLY_MARKERS = ("text response", "safety")


def extract_decade(prompt: str) -> Optional[str]:
    """Extract the decade (e.g. "1950s") from a prompt string"""
    match = DECADE_PATTERN.search(prompt or "")
    return match.group(1) if match else None


def build_fallback_prompt(decade: str, template: str = DEFAULT_FALLBACK_TEMPLATE) -> str:
    """Fill the fallback template; it carries nothing from the primary prompt but the decade"""
    return template.format(decade=decade)


def should_fall_back(outcome: GenerationOutcome) -> bool:
    """True when the outcome looks like the model declined to draw"""
    if isinstance(outcome, PolicyRejected):
        return True
    if isinstance(outcome, Failure) and outcome.kind is FailureKind.UNEXPECTED_TEXT_ONLY:
        lowered = outcome.message.lower()
        return any(marker in lowered for marker in TEXT_ONLY_MARKERS)
    return False


class FallbackController:
    """Runs at most one fallback cycle through the retry executor"""

    def __init__(self, executor: RetryExecutor, template: Optional[str] = None):
        self.executor = executor
        self.template = template or executor.client.settings.fallback_prompt_template

    async def recover(
        self,
        request: GenerationRequest,
        outcome: GenerationOutcome,
        logger: Optional[RunLogger] = None
    ) -> GenerationOutcome:
        """
        Attempt one fallback cycle for a rejected request

        Args:
            request: The primary request that was rejected
            outcome: Interpreted outcome of the primary request
            logger: Run logger for the enclosing orchestration call

        Returns:
            The primary outcome if fallback does not apply, otherwise the
            outcome of the single fallback cycle (final either way)
        """
        logger = logger or RunLogger()

        if not should_fall_back(outcome):
            return outcome

        decade = extract_decade(request.prompt_text)
        if decade is None:
            logger.set_fallback_info(None, False, "no decade found in prompt")
            return outcome

        logger.set_fallback_info(decade, True, type(outcome).__name__)
        fallback_prompt = build_fallback_prompt(decade, self.template)
        reply = await self.executor.execute(
            request.image, fallback_prompt, logger=logger, phase="fallback"
        )
        return interpret_response(reply)
