"""Card batch export functionality."""

from .anki_exporter import AnkiExporter, export_cards_to_json, load_cards_from_json

__all__ = ["AnkiExporter", "export_cards_to_json", "load_cards_from_json"]
