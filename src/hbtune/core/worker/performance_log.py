"""
Append-only log of evaluated configurations
===========================================

"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator

import pandas

from hbtune.core.worker.record import ConfigurationRecord

logger = logging.getLogger(__name__)


class PerformanceLog:
    """Ordered archive of every configuration evaluated during a Hyperband execution.

    Records are only ever appended, in the order they were submitted to the evaluator.
    """

    def __init__(self):
        self._records: list[ConfigurationRecord] = []

    def append(self, records: Iterable[ConfigurationRecord]) -> None:
        """Append evaluated records at the end of the log.

        Raises
        ------
        ValueError
            If one of the records was not evaluated.

        """
        records = list(records)
        for record in records:
            if not record.is_evaluated:
                raise ValueError(f"Cannot log a record without results: {record}")

        self._records.extend(records)
        logger.debug("Appended %d records, log size is %d", len(records), len(self))

    def where(
        self, bracket: int | None = None, bracket_stage: int | None = None
    ) -> list[ConfigurationRecord]:
        """Return the records of a bracket and/or a stage."""
        return [
            record
            for record in self._records
            if (bracket is None or record.bracket == bracket)
            and (bracket_stage is None or record.bracket_stage == bracket_stage)
        ]

    def to_pandas(self) -> pandas.DataFrame:
        """Builds a dataframe with one row per evaluated record."""
        return pandas.DataFrame([record.to_dict() for record in self._records])

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ConfigurationRecord]:
        return iter(list(self._records))

    def __getitem__(self, index):
        return self._records[index]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(records={len(self)})"
