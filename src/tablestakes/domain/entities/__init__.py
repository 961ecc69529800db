"""Domain entities for tablestakes.

Exports:
    Table:
        - Table: Column-oriented table of text cells
        - COUNT_HEADER: Header of the count column in tally results
"""

from tablestakes.domain.entities.table import COUNT_HEADER, Table

__all__ = [
    "Table",
    "COUNT_HEADER",
]
