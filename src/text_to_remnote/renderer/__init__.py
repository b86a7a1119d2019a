"""Card rendering into note host markup."""

from .card_renderer import CardRenderer, RenderSummary, get_or_create_folder, normalize_cloze

__all__ = ["CardRenderer", "RenderSummary", "get_or_create_folder", "normalize_cloze"]
