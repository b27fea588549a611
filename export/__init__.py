"""Export module for JSON reports and the highlighted diff PDF."""
from export.json_exporter import export_json
from export.pdf_exporter import DiffDocumentWriter, region_to_rect

__all__ = ["export_json", "DiffDocumentWriter", "region_to_rect"]
