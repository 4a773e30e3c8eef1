"""
Theme store: the catalog, the active theme and its published side effects.
"""

from typing import Optional, Sequence

from pydantic import ValidationError

from whispernotes.config import settings
from whispernotes.database.db import LocalStorage
from whispernotes.errors import UnknownThemeError
from whispernotes.logging import get_logger
from whispernotes.models import Theme, ThemeSnapshot
from whispernotes.services.document import DocumentSurface, apply_theme
from whispernotes.stores.base import Store
from whispernotes.themes import GHIBLI_THEMES

logger = get_logger('stores.theme')


class ThemeStore(Store[ThemeSnapshot]):
    """
    The active theme is always a catalog entry, or a copy of one whose only
    difference is ``dark_mode``.
    """

    def __init__(
        self,
        storage: LocalStorage,
        surface: DocumentSurface,
        catalog: Sequence[Theme] = GHIBLI_THEMES,
        storage_key: Optional[str] = None,
    ):
        if not catalog:
            raise ValueError("Theme catalog must not be empty")
        super().__init__(storage, storage_key or settings.THEME_STORAGE_KEY)
        self.surface = surface
        self._themes: tuple[Theme, ...] = tuple(catalog)
        self._current: Theme = self._themes[0]

    @property
    def current_theme(self) -> Theme:
        return self._current

    def list_themes(self) -> tuple[Theme, ...]:
        return self._themes

    def get_theme(self, theme_id: str) -> Optional[Theme]:
        return next((t for t in self._themes if t.id == theme_id), None)

    def _build_snapshot(self) -> ThemeSnapshot:
        return ThemeSnapshot(
            themes=self._themes,
            current_theme=self._current,
            is_loading=self.is_loading,
        )

    def _serialize(self):
        return self._current.to_json_dict()

    def _checkpoint(self) -> Theme:
        return self._current

    def _rollback(self, checkpoint: Theme) -> None:
        self._current = checkpoint
        apply_theme(self.surface, checkpoint)

    def _restore(self, stored) -> None:
        self._current = self._restored_theme(stored)
        apply_theme(self.surface, self._current)
        logger.info(f"Active theme: {self._current.id}")

    def _restored_theme(self, stored) -> Theme:
        default = self._themes[0]
        if stored is None:
            return default
        try:
            saved = Theme.model_validate(stored)
        except ValidationError as e:
            logger.warning(f"Failed to load theme, using '{default.id}': {e}")
            return default
        base = self.get_theme(saved.id)
        if base is None:
            logger.warning(f"Stored theme '{saved.id}' is not in the catalog, using '{default.id}'")
            return default
        if saved.dark_mode == base.dark_mode:
            return base
        return base.model_copy(update={"dark_mode": saved.dark_mode})

    def _check_in_catalog(self, theme: Theme) -> None:
        base = self.get_theme(theme.id)
        if base is None or not base.same_palette(theme):
            raise UnknownThemeError(f"Theme '{theme.id}' is not a catalog theme")

    # ── Operations ──

    async def select_theme(self, theme: Theme) -> Theme:
        self._check_in_catalog(theme)
        async with self._lock:
            checkpoint = self._checkpoint()
            self._current = theme
            apply_theme(self.surface, theme)
            await self._commit(checkpoint)
        logger.info(f"Selected theme {theme.id} (dark={theme.is_dark})")
        return theme

    async def select_theme_by_id(self, theme_id: str) -> Theme:
        theme = self.get_theme(theme_id)
        if theme is None:
            raise UnknownThemeError(f"Theme '{theme_id}' is not a catalog theme")
        return await self.select_theme(theme)

    async def set_dark_mode(self, is_dark: bool) -> Theme:
        return await self.select_theme(self._current.model_copy(update={"dark_mode": is_dark}))
