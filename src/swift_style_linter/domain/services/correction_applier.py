"""Apply replacement ranges to a file's text without letting them corrupt each other."""

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from swift_style_linter.domain.entities import Correction, Location, RuleDescription, TextEdit

if TYPE_CHECKING:
    from swift_style_linter.domain.source_file import SourceFile


class CorrectionApplier:
    """
    Applies edits last-to-first so pending lower offsets stay valid.

    Edits are taken in descending start offset; ties keep submission order,
    so the earlier-submitted edit wins. An edit overlapping one already
    applied is skipped and yields no Correction. Corrections report each
    edit's original offset, ascending.
    """

    def apply(
        self,
        file: "SourceFile",
        edits: Sequence[tuple[RuleDescription, TextEdit]],
    ) -> list[Correction]:
        if not edits:
            return []

        original_length = len(file.contents)
        ordered = sorted(edits, key=lambda pair: pair[1].offset, reverse=True)
        contents = file.contents
        applied: list[tuple[RuleDescription, TextEdit]] = []
        last_applied: Optional[TextEdit] = None

        for description, edit in ordered:
            if edit.offset < 0 or edit.length < 0 or edit.end > original_length:
                logging.warning(
                    "Skipping out-of-range edit %s from %s", edit, description.identifier
                )
                continue
            if last_applied is not None and edit.overlaps(last_applied):
                logging.debug(
                    "Skipping edit %s from %s: overlaps %s",
                    edit, description.identifier, last_applied,
                )
                continue
            contents = contents[:edit.offset] + edit.replacement + contents[edit.end:]
            applied.append((description, edit))
            last_applied = edit

        # Locations resolve against the pre-correction line index.
        corrections = [
            Correction(rule_description=description, location=Location.from_offset(file, edit.offset))
            for description, edit in reversed(applied)
        ]
        if applied:
            file.contents = contents
        return corrections
