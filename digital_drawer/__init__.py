"""
Digital Drawer - Source Package

Household records (bills, warranties, official documents) and personal
finances kept in a local key-value store, with JSON backup and restore.

DESIGN PRINCIPLES:
1. Backups are untrusted input: validate everything before writing
2. Fail early, fail visibly
3. No silent corrections
4. Every export and restore must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Digital Drawer Team"
