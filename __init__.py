"""
Commute Expense Summary Application

This package builds the commute reimbursement text ("【通勤】＠716円×4日（4/1～3,5）")
from a monthly attendance workbook.

Key modules:
- main.py: FastAPI application and command line entry point
- commute_summary.py: Commute day extraction and summary formatting
- workbook_reader.py: Worksheet lookup and cell range reading
- config.py: Environment-driven settings
- utils/result.py: Result pattern implementation for error handling
"""
