"""CSV export module for the job market dashboard."""
from job_market.export.csv_exporter import (
    export_filename,
    parse_list_cell,
    save_csv,
    to_csv,
)

__all__ = ["to_csv", "save_csv", "export_filename", "parse_list_cell"]
