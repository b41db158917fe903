
from __future__ import annotations
import pandas as pd

from lrsig.ansi import error


class results_store:
    """
    Append-only collection of per-unit result tables.

    Each appended frame is tagged with its key (e.g. ``(interaction, sample)`` or
    ``(interaction, sample, replicate)``), and a key may only be written once. The flat
    table is assembled in one concatenation by :meth:`frame`, with key columns first
    and rows ordered by insertion.
    """

    def __init__(self, keys: list, columns: list | None = None):
        self.keys = list(keys)
        self.columns = columns
        self.entries = {}


    def append(self, key, frame: pd.DataFrame | None) -> None:
        key = tuple(key) if isinstance(key, (tuple, list)) else (key,)
        if len(key) != len(self.keys):
            error(f"store key {key} does not match key columns {self.keys}.")
        if key in self.entries:
            error(f"results for {dict(zip(self.keys, key))} were already stored.")
        self.entries[key] = frame


    def __contains__(self, key):
        key = tuple(key) if isinstance(key, (tuple, list)) else (key,)
        return key in self.entries


    def __len__(self):
        return len(self.entries)


    def get(self, key):
        key = tuple(key) if isinstance(key, (tuple, list)) else (key,)
        return self.entries.get(key)


    def scorable(self):
        ''' Keys whose stored result is not None. '''
        return [k for k, v in self.entries.items() if v is not None]


    def frame(self) -> pd.DataFrame:

        parts = []
        for key, frame in self.entries.items():
            if frame is None or len(frame) == 0: continue
            frame = frame.copy()
            for name, value in reversed(list(zip(self.keys, key))):
                frame.insert(0, name, value)
            parts.append(frame)

        if len(parts) == 0:
            return pd.DataFrame(columns = self.keys + list(self.columns or []))

        return pd.concat(parts, ignore_index = True)
