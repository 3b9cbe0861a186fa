"""Wikipedia query options. Read-only; no business logic."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from llm_adapters.errors import InvalidConfigurationError

# TextExtracts serves at most 20 intro extracts per request
MAX_TOP_K_RESULTS = 20


class WikipediaQueryOptions(BaseModel):
    """Immutable MediaWiki query limits. The language code selects the regional endpoint."""

    model_config = ConfigDict(frozen=True)

    top_k_results: int = Field(default=3, gt=0, le=MAX_TOP_K_RESULTS, description="Max pages returned")
    max_doc_content_length: int = Field(
        default=4000, gt=0, description="Max characters kept from each page summary"
    )
    lang: str = Field(
        default="en",
        pattern=r"^[a-z]{2,3}(-[a-z]+)*$",
        description="Wikipedia language code, e.g. en, es, fr, zh-yue",
    )

    @property
    def api_url(self) -> str:
        return f"https://{self.lang}.wikipedia.org/w/api.php"

    def _with(self, **changes: Any) -> "WikipediaQueryOptions":
        try:
            return self.model_validate({**self.model_dump(), **changes})
        except ValidationError as e:
            raise InvalidConfigurationError(str(e)) from e

    def with_lang(self, lang: str) -> "WikipediaQueryOptions":
        return self._with(lang=lang)

    def with_top_k_results(self, top_k: int) -> "WikipediaQueryOptions":
        return self._with(top_k_results=top_k)

    def with_max_doc_content_length(self, max_len: int) -> "WikipediaQueryOptions":
        return self._with(max_doc_content_length=max_len)


DEFAULT_WIKIPEDIA_OPTIONS = WikipediaQueryOptions()
