#!/usr/bin/env python3
"""Pairwise comparisons codec (alternativesComparisons).

Pairs are written sorted by initial then terminal alternative id so that
matrices computed in any order serialize identically.
"""

import logging
from typing import Mapping, Optional
from xml.etree.ElementTree import Element, SubElement

from ....models.entities import Alternative, Criterion
from ....models.matrices import AlternativesMatrix
from .base import CONCEPT_ATTRIBUTE, XmcdaCodec, attribute, child_text

logger = logging.getLogger(__name__)


class AlternativesMatrixCodec(XmcdaCodec):
    """Reads and writes alternatives comparison matrices.

    With fuzzy set, every value must be a degree in [0, 1] (concordance,
    credibility, ...).
    """

    KIND = "alternativesComparisons"

    def __init__(self, fuzzy: bool = False, errors=None):
        super().__init__(errors)
        self.fuzzy = fuzzy

    def _read_pair_ends(self, x_pair: Element) -> Optional[tuple[Alternative, Alternative]]:
        initial_id = child_text(x_pair, "initial/alternativeID")
        terminal_id = child_text(x_pair, "terminal/alternativeID")
        if initial_id is None or terminal_id is None:
            self._error("Expected initial and terminal alternatives in pair", initial=initial_id, terminal=terminal_id)
            return None
        return Alternative(initial_id), Alternative(terminal_id)

    def _put(self, matrix: AlternativesMatrix, initial: Alternative, terminal: Alternative,
             x_value: Optional[Element], context: str):
        if (initial, terminal) in matrix:
            self._error(f"Duplicate comparison {context}", initial=initial.id, terminal=terminal.id)
            return
        value = self.read_number(x_value, context)
        if value is None:
            return
        if self.fuzzy and not 0.0 <= value <= 1.0:
            self._error(f"Value of {context} is out of [0, 1]", initial=initial.id, terminal=terminal.id, value=value)
            return
        matrix.put(initial, terminal, value)

    def read(self, fragment: Element) -> AlternativesMatrix:
        """Read a matrix with one value per pair.

        Raises:
            InvalidInputError: On a duplicate pair, a missing end, or an out of range fuzzy value
        """
        self._check_kind(fragment)
        matrix = AlternativesMatrix()
        for x_pair in fragment.findall("pairs/pair"):
            ends = self._read_pair_ends(x_pair)
            if ends is None:
                continue
            initial, terminal = ends
            self._put(matrix, initial, terminal, x_pair.find("value"), f"{initial.id} -> {terminal.id}")
        logger.debug(f"Read comparison matrix with {matrix.value_count} values")
        return matrix

    def read_by_criteria(self, fragment: Element) -> dict[Criterion, AlternativesMatrix]:
        """Read a matrix holding one value per criterion for each pair."""
        self._check_kind(fragment)
        matrices: dict[Criterion, AlternativesMatrix] = {}
        for x_pair in fragment.findall("pairs/pair"):
            ends = self._read_pair_ends(x_pair)
            if ends is None:
                continue
            initial, terminal = ends
            for x_value in x_pair.findall("values/value"):
                criterion_id = attribute(x_value, "id")
                if criterion_id is None:
                    self._error(
                        f"Expected criterion id on value of {initial.id} -> {terminal.id}",
                        initial=initial.id, terminal=terminal.id,
                    )
                    continue
                matrix = matrices.setdefault(Criterion(criterion_id), AlternativesMatrix())
                self._put(matrix, initial, terminal, x_value, f"{initial.id} -> {terminal.id} on {criterion_id}")
        return matrices

    @staticmethod
    def _sorted_pairs(matrices) -> list[tuple[Alternative, Alternative]]:
        pairs = {(initial, terminal) for matrix in matrices for initial, terminal, _ in matrix}
        return sorted(pairs, key=lambda pair: (pair[0].id, pair[1].id))

    def _write_pair(self, x_pairs: Element, initial: Alternative, terminal: Alternative) -> Element:
        x_pair = SubElement(x_pairs, "pair")
        self.write_id_element(SubElement(x_pair, "initial"), "alternativeID", initial.id)
        self.write_id_element(SubElement(x_pair, "terminal"), "alternativeID", terminal.id)
        return x_pair

    def write(self, matrix: AlternativesMatrix, concept: Optional[str] = None) -> Element:
        x_comparisons = Element(self.KIND)
        if concept is not None:
            x_comparisons.set(CONCEPT_ATTRIBUTE, concept)
        pairs = self._sorted_pairs([matrix])
        if pairs:
            x_pairs = SubElement(x_comparisons, "pairs")
            for initial, terminal in pairs:
                x_pair = self._write_pair(x_pairs, initial, terminal)
                self.write_value(x_pair, matrix.get(initial, terminal))
        return x_comparisons

    def write_by_criteria(self, matrices: Mapping[Criterion, AlternativesMatrix],
                          concept: Optional[str] = None) -> Element:
        """Write per-criterion matrices; values inside a pair are sorted by criterion id."""
        x_comparisons = Element(self.KIND)
        if concept is not None:
            x_comparisons.set(CONCEPT_ATTRIBUTE, concept)
        criteria = sorted(matrices, key=lambda criterion: criterion.id)
        pairs = self._sorted_pairs(matrices.values())
        if pairs:
            x_pairs = SubElement(x_comparisons, "pairs")
            for initial, terminal in pairs:
                x_pair = self._write_pair(x_pairs, initial, terminal)
                x_values = SubElement(x_pair, "values")
                for criterion in criteria:
                    value = matrices[criterion].get(initial, terminal)
                    if value is None:
                        continue
                    self.write_value(x_values, value).set("id", criterion.id)
        return x_comparisons
