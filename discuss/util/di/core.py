"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from discuss.config import (
    AttachmentSettings,
    AuthSettings,
    CommentSettings,
    Settings,
)
from discuss.util.di.base import ProviderBase
from discuss.util.snowflake import SnowflakeGenerator


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_comment_settings(self, settings: Settings) -> CommentSettings:
        """Provide thread rules."""
        return settings.comments

    @provide(scope=Scope.APP)
    def provide_attachment_settings(self, settings: Settings) -> AttachmentSettings:
        """Provide attachment settings."""
        return settings.attachments

    @provide(scope=Scope.APP)
    def provide_id_generator(self) -> SnowflakeGenerator:
        """Provide the process-wide identifier generator."""
        return SnowflakeGenerator()
