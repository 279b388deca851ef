"""Folds key/value pairs into a nested mapping."""

from __future__ import annotations

import logging
from typing import Iterable

from vdf_keyvalues.domain.exceptions import EmptyKeyEncounteredException
from vdf_keyvalues.domain.value_objects import KeyValueMap, KeyValuePair

logger = logging.getLogger(__name__)


class KeyValueMapBuilder:
    """Builds a ``KeyValueMap`` from pairs, resolving duplicate keys.

    With ``use_latest_value=False`` (earliest wins) the first write to a slot
    stands and later conflicting pairs are dropped. With ``True`` (latest
    wins) later pairs overwrite strings and submaps alike. Submaps reached
    through the same path are always merged.
    """

    def __init__(self, use_latest_value: bool = False) -> None:
        self._use_latest_value = use_latest_value
        self.result: KeyValueMap = {}

    def add(self, pair: KeyValuePair) -> None:
        if not pair.key_path:
            raise EmptyKeyEncounteredException("Empty key encountered")

        *parents, last_key = pair.key_path
        node = self.result
        for key in parents:
            slot = node.get(key)
            if isinstance(slot, dict):
                node = slot
                continue
            if slot is not None and not self._use_latest_value:
                logger.debug("Dropping %s: '%s' already holds a value", pair.dotted_key, key)
                return
            child: KeyValueMap = {}
            node[key] = child
            node = child

        if last_key not in node or self._use_latest_value:
            node[last_key] = pair.value
        else:
            logger.debug("Dropping duplicate key %s", pair.dotted_key)

    def extend(self, pairs: Iterable[KeyValuePair]) -> None:
        for pair in pairs:
            self.add(pair)

    def reset(self) -> None:
        self.result = {}
