"""
Sheets API Service
==================

Google Sheets CSV export to JSON API.

Features:
- Lenient CSV tokenizing with multi-line quoted cells
- Positional header mapping and price/description normalisation
- Time-bounded in-memory cache per spreadsheet tab
- Pull-through refresh from the Google Sheets CSV export

"""

__version__ = "2.1.0"
