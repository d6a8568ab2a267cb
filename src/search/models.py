"""
Query Models.

Pydantic model describing one logical search call.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

SafeSearch = Literal["on", "moderate", "off"]


class SearchQuery(BaseModel):
    """Immutable search parameters for one call."""

    model_config = ConfigDict(frozen=True)

    keywords: str = Field(min_length=1)
    region: str = "wt-wt"
    safesearch: SafeSearch = "moderate"
    timelimit: str | None = None
    facets: dict[str, str] = Field(
        default_factory=dict, description="Type-specific filters (size, color, duration...)"
    )
    max_results: int | None = None

    @field_validator("region", "safesearch", mode="before")
    @classmethod
    def lower_or_default(cls, v: str | None, info: ValidationInfo) -> str:
        """Treat empty values as the default and lowercase the rest."""
        if not v:
            return "wt-wt" if info.field_name == "region" else "moderate"
        return str(v).lower()

    @field_validator("timelimit", mode="before")
    @classmethod
    def empty_timelimit(cls, v: str | None) -> str | None:
        """Empty timelimit means no time filter."""
        return v or None

    def facet_filter(self, prefixes: dict[str, str]) -> str:
        """
        Build the `f` filter parameter from facets.

        Args:
            prefixes: Facet name -> upstream filter name, in output order
                      (e.g., {"size": "size", "timelimit": "time"})

        Returns:
            Filter string (e.g., "time:Day,size:Large,"), empty if no facet set

        Examples:
            >>> SearchQuery(keywords="cat", facets={"size": "Large"}).facet_filter(
            ...     {"size": "size", "color": "color"}
            ... )
            'size:Large'
        """
        values = {**self.facets}
        if self.timelimit:
            values.setdefault("timelimit", self.timelimit)

        parts = [
            f"{upstream}:{values[name]}"
            for name, upstream in prefixes.items()
            if values.get(name)
        ]
        return ",".join(parts)
