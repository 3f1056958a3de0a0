"""
Prompt Loader - Loads the decade catalogue and builds primary style prompts
"""
from typing import Dict, List, Any, Optional, Tuple

from .config_loader import load_decade_catalogue
from .errors import InvalidInputFormat

DEFAULT_PROMPT_TEMPLATE = (
    "Reimagine the person in this photo in the style of the {decade}. "
    "This includes clothing, hairstyle, photo quality, and the overall aesthetic "
    "of that decade. The output must be a photorealistic image showing the person clearly."
)


class PromptLoader:
    """Loads decades and the primary prompt template from configs/decades.json"""

    def __init__(self, decades_file: Optional[str] = None):
        self.decades_file = decades_file
        self._catalogue_cache: Optional[Dict[str, Any]] = None

    def get_catalogue(self) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        """Get the catalogue (cached after the first successful load)"""
        if self._catalogue_cache is not None:
            return self._catalogue_cache, None
        data, error = load_decade_catalogue(self.decades_file)
        if data is not None:
            self._catalogue_cache = data
        return data, error

    def get_decades(self) -> List[str]:
        data, error = self.get_catalogue()
        if error or not data:
            return []
        return [str(d) for d in data["decades"]]

    def get_template(self) -> str:
        data, _ = self.get_catalogue()
        if data and isinstance(data.get("prompt_template"), str):
            return data["prompt_template"]
        return DEFAULT_PROMPT_TEMPLATE

    def build_prompt(self, decade: str) -> str:
        """
        Build the primary prompt for a decade offered in the catalogue

        Args:
            decade: Decade label, e.g. "1970s"

        Returns:
            Prompt text embedding the decade

        Raises:
            InvalidInputFormat: If the decade is not in the catalogue
        """
        decades = self.get_decades()
        if decade not in decades:
            raise InvalidInputFormat(
                f"Unknown decade {decade!r}; expected one of: {', '.join(decades) or 'none configured'}"
            )
        return self.get_template().format(decade=decade)


_prompt_loader_instance: Optional[PromptLoader] = None


def get_prompt_loader() -> PromptLoader:
    """Get singleton instance of PromptLoader"""
    global _prompt_loader_instance
    if _prompt_loader_instance is None:
        _prompt_loader_instance = PromptLoader()
    return _prompt_loader_instance


def build_decade_prompt(decade: str) -> str:
    """Convenience function for the default catalogue"""
    return get_prompt_loader().build_prompt(decade)
