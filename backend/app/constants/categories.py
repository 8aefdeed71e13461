"""
categories.py
- Purpose: News article categories offered by the admin console.
"""

LEGAL_CATEGORIES: tuple[str, ...] = (
    "CIVIL MATTERS",
    "CRIMINAL MATTERS",
    "FAMILY MATTERS",
    "LABOUR/EMPLOYEE MATTERS",
    "TAXATION MATTERS",
    "DOCUMENTATION & REGISTRATION",
    "TRADEMARK & COPYRIGHT MATTERS",
    "HIGH COURT MATTERS",
    "SUPREME COURT MATTERS",
    "FORUMS AND TRIBUNAL MATTERS",
    "BUSINESS MATTERS",
)
