"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use DOCGEN_ prefix (e.g., DOCGEN_SOURCE_EXTENSION=.mjs).

Settings can also be loaded from a .env file in the project root.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use DOCGEN_ prefix.

    Examples:
        DOCGEN_SOURCE_EXTENSION=.mjs
        DOCGEN_MEMOIZE_IMPORTS=true
        DOCGEN_LOCAL_PREFIXES='["./"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Module resolution
    source_extension: str = Field(
        default=".js",
        description="The single source extension tried when resolving local imports",
    )

    index_basename: str = Field(
        default="index",
        description="Stem of the file that stands in for a directory import",
    )

    local_prefixes: List[str] = Field(
        default_factory=lambda: ["./", "../"],
        description="Specifier prefixes that denote a file inside the project",
    )

    # Document merge
    marker_start: str = Field(
        default="<!-- START TOKEN({token}) -->",
        description="Template of the raw markup node that opens a token region",
    )

    marker_end: str = Field(
        default="<!-- END TOKEN({token}) -->",
        description="Template of the raw markup node that closes a token region",
    )

    # Formatting
    default_heading: str = Field(
        default="API",
        description="Section title of a freshly generated document",
    )

    undocumented_text: str = Field(
        default="Undocumented declaration.",
        description="Description used for exports without a doc comment",
    )

    # Traversal
    memoize_imports: bool = Field(
        default=False,
        description="Process every dependency file once per run instead of once per reference",
    )

    # Debug output
    debug_indent: int = Field(
        default=2,
        description="JSON indentation of the IR/token/AST debug dumps",
    )

    def startMarker_make(self, token: str) -> str:
        """
        Generate the start marker text for a token name.

        Example:
            >>> settings = AppSettings()
            >>> settings.startMarker_make('API')
            '<!-- START TOKEN(API) -->'
        """
        return self.marker_start.format(token=token)

    def endMarker_make(self, token: str) -> str:
        """
        Generate the end marker text for a token name.

        Example:
            >>> settings = AppSettings()
            >>> settings.endMarker_make('API')
            '<!-- END TOKEN(API) -->'
        """
        return self.marker_end.format(token=token)

    def specifier_isLocal(self, specifier: str) -> bool:
        """
        Check whether an import specifier names a file of this project.

        Args:
            specifier: Import source as written, e.g. "./utils" or "lodash"

        Returns:
            True for local relative specifiers, False for package specifiers

        Example:
            >>> settings = AppSettings()
            >>> settings.specifier_isLocal('./utils')
            True
            >>> settings.specifier_isLocal('lodash')
            False
        """
        return any(specifier.startswith(prefix) for prefix in self.local_prefixes)


# Singleton instance - import this in your code
appsettings = AppSettings()
