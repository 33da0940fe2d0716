from .csv_reader import read_csv, read_csv_with_options
from .excel_reader import get_excel_sheet_names, read_excel, read_excel_cell
from .pdf_reader import read_pdf, read_pdf_details, read_pdf_page, search_in_pdf

__all__ = [
    "read_csv",
    "read_csv_with_options",
    "read_excel",
    "read_excel_cell",
    "get_excel_sheet_names",
    "read_pdf",
    "read_pdf_details",
    "read_pdf_page",
    "search_in_pdf",
]
