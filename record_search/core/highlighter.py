"""Highlighting of query tokens inside matched field values."""

import re
from typing import List, Sequence

from ..models.response import FusedResult, HighlightFragment, MatchedField


class Highlighter:
    """Wraps query tokens found in field values with a highlight tag."""

    def __init__(self, tag: str = "mark") -> None:
        self.tag = tag
        self.tag_regex = re.compile(r"(<[^>]*>)")

    def highlight_text(self, text: str, tokens: Sequence[str]) -> str:
        """
        Wrap every case-insensitive occurrence of each token.

        Tokens are applied one pass at a time in query order, each pass
        working on the output of the previous one. Passes only rewrite text
        outside tags, so earlier markup is never split.
        """
        highlighted = text
        replacement = rf"<{self.tag}>\1</{self.tag}>"
        for token in tokens:
            if not token:
                continue
            pattern = re.compile(f"({re.escape(token)})", re.IGNORECASE)
            segments = self.tag_regex.split(highlighted)
            # Odd positions hold the tags captured by the split
            highlighted = "".join(
                segment if i % 2 else pattern.sub(replacement, segment)
                for i, segment in enumerate(segments)
            )
        return highlighted

    def highlight_fields(
        self, matched_fields: Sequence[MatchedField], tokens: Sequence[str]
    ) -> List[HighlightFragment]:
        """One fragment per matched field entry, duplicates included."""
        return [
            HighlightFragment(
                field=matched.field,
                original=matched.value,
                highlighted=self.highlight_text(matched.value, tokens),
                score=matched.score,
            )
            for matched in matched_fields
        ]

    def annotate(self, results: Sequence[FusedResult], tokens: Sequence[str]) -> None:
        """Attach highlight fragments to each result in place."""
        for result in results:
            result.highlights = self.highlight_fields(result.matched_fields, tokens)
