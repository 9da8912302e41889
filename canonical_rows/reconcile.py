from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from intake.models import ScanSources

from .aliases import AliasIndex
from .fields import (
    FIELD_SPECS,
    NARRATIVE_ALIASES,
    NARRATIVE_PATHS,
    FieldSpec,
    resolution_order,
    with_extra_aliases,
)
from .models import CanonicalRow, Tier
from .narrative import NarrativeExtractor, NarrativeFacts, narrative_as_text
from .parsing import Number
from .paths import pick_path

logger = logging.getLogger(__name__)

Resolution = Tuple[Optional[Number], Tier]


class RowReconciler:
    """Merge structured, side-table and narrative sources into canonical rows.

    Each field walks the same precedence: structured paths, side-table
    aliases, narrative facts (for the fields that declare one), then a
    derivation from already-resolved fields. Anything still missing is
    ``None``.
    """

    def __init__(
        self,
        specs: Sequence[FieldSpec] = FIELD_SPECS,
        *,
        extra_aliases: Optional[Mapping[str, Sequence[str]]] = None,
        alias_index: Optional[AliasIndex] = None,
        extractor: Optional[NarrativeExtractor] = None,
    ) -> None:
        self.specs = with_extra_aliases(specs, extra_aliases or {})
        self._order = resolution_order(self.specs)
        self.alias_index = alias_index or AliasIndex()
        self.extractor = extractor or NarrativeExtractor()

    # ------------------------------------------------------------------ public --
    def reconcile(self, sources: ScanSources) -> CanonicalRow:
        try:
            return self._reconcile(sources)
        finally:
            self.alias_index.clear()

    def reconcile_all(self, bundles: Iterable[ScanSources]) -> List[CanonicalRow]:
        rows = [self.reconcile(sources) for sources in bundles]
        logger.info("Reconciled %d row(s)", len(rows))
        return rows

    def resolve_narrative(self, sources: ScanSources) -> str:
        if sources.narrative is not None:
            return narrative_as_text(sources.narrative)
        structured = pick_path(sources.structured, NARRATIVE_PATHS)
        if structured is not None:
            return narrative_as_text(structured)
        side = self.alias_index.lookup(sources.side_row, NARRATIVE_ALIASES)
        if side is not None:
            return narrative_as_text(side)
        return ""

    # --- helpers -----------------------------------------------------------------

    def _reconcile(self, sources: ScanSources) -> CanonicalRow:
        narrative = self.resolve_narrative(sources)
        facts = self.extractor.extract(narrative)

        values: Dict[str, Optional[Number]] = {}
        tiers: Dict[str, Tier] = {}
        for spec in self._order:
            value, tier = self._resolve_field(spec, sources, facts, values)
            values[spec.name] = value
            tiers[spec.name] = tier
            if tier in (Tier.NARRATIVE, Tier.DERIVED):
                logger.debug("%s: %s filled from %s tier", sources.username, spec.name, tier.value)

        return CanonicalRow(
            username=sources.username,
            reasons=narrative,
            sources=MappingProxyType(tiers),
            **values,
        )

    def _resolve_field(
        self,
        spec: FieldSpec,
        sources: ScanSources,
        facts: NarrativeFacts,
        resolved: Mapping[str, Optional[Number]],
    ) -> Resolution:
        structured = spec.convert(pick_path(sources.structured, spec.paths))
        if structured is not None:
            return structured, Tier.STRUCTURED

        if spec.derive_first:
            derived = self._derive(spec, resolved)
            if derived is not None:
                return derived, Tier.DERIVED

        side = spec.convert(self.alias_index.lookup(sources.side_row, spec.aliases))
        if side is not None:
            return side, Tier.SIDE_TABLE

        if spec.narrative is not None:
            mined = facts.get(spec.narrative)
            if mined is not None:
                return mined, Tier.NARRATIVE

        if not spec.derive_first:
            derived = self._derive(spec, resolved)
            if derived is not None:
                return derived, Tier.DERIVED

        return None, Tier.UNKNOWN

    @staticmethod
    def _derive(spec: FieldSpec, resolved: Mapping[str, Optional[Number]]) -> Optional[Number]:
        if spec.derive is None:
            return None
        return spec.derive(resolved)


def reconcile_rows(
    bundles: Iterable[ScanSources],
    *,
    extra_aliases: Optional[Mapping[str, Sequence[str]]] = None,
) -> List[CanonicalRow]:
    return RowReconciler(extra_aliases=extra_aliases).reconcile_all(bundles)
