"""Constraint validator: checks an intent is realizable on a pixel map.

Checks, per enabled layer: the zone resolves to pixels, the spacing rule's
numbers fit each resolved range, and named segments exist. Across layers:
equal-priority overlaps (needs a decision) and low color contrast (warning
only). Unsatisfied checks with alternatives become ambiguity flags; those
without alternatives are fatal.
"""

from __future__ import annotations

import logging
import math

from pydantic import BaseModel, ConfigDict, Field

from rooflight.core.composition.zone_resolver import ZoneResolver
from rooflight.core.config.models import CompositionConfig
from rooflight.core.design.models.intent import (
    AlternativeSuggestion,
    AmbiguityFlag,
    ClarificationChoice,
    DesignConstraint,
    DesignIntent,
    DesignLayer,
    PixelRange,
    SpacingRule,
    ZoneSelector,
)
from rooflight.core.design.vocabulary import (
    AmbiguityType,
    ArchitecturalRole,
    ConstraintType,
    SpacingType,
)
from rooflight.core.roofline.models import PixelMap, SegmentType
from rooflight.core.utils.color import contrast

logger = logging.getLogger(__name__)

MAX_ALTERNATIVES = 4


class ValidationResult(BaseModel):
    """Constraints found plus ambiguities that need user input."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    constraints: list[DesignConstraint] = Field(default_factory=list)
    additional_ambiguities: list[AmbiguityFlag] = Field(default_factory=list)

    @property
    def unsatisfied(self) -> list[DesignConstraint]:
        return [c for c in self.constraints if not c.is_satisfied]

    @property
    def all_satisfied(self) -> bool:
        return not any(c.blocks_composition for c in self.constraints)

    @property
    def fatal(self) -> list[DesignConstraint]:
        """Blocking constraints with nothing to offer the user."""
        return [c for c in self.constraints if c.blocks_composition and not c.alternatives]

    @property
    def warnings(self) -> list[str]:
        return [
            c.failure_reason
            for c in self.constraints
            if c.advisory and not c.is_satisfied and c.failure_reason
        ]

    def attach_to(self, intent: DesignIntent) -> DesignIntent:
        """Copy of ``intent`` carrying these constraints and merged ambiguities.

        Flags raised by an earlier validation are replaced by this result's
        flags. Upstream flags are kept and win over new ones with the same
        type and layer.
        """
        ambiguities = [a for a in intent.ambiguities if not a.from_validation]
        known = {a.key for a in ambiguities}
        for flag in self.additional_ambiguities:
            if flag.key not in known:
                ambiguities.append(flag)
                known.add(flag.key)
        return intent.model_copy(
            update={"constraints": list(self.constraints), "ambiguities": ambiguities}
        )


def _satisfied(constraint_type: ConstraintType, layer_id: str | None) -> DesignConstraint:
    return DesignConstraint(type=constraint_type, is_satisfied=True, layer_id=layer_id)


def _choices(alternatives: list[AlternativeSuggestion], recommend_below: float) -> list[ClarificationChoice]:
    return [
        ClarificationChoice(
            id=a.id,
            label=a.label,
            description=a.description,
            is_recommended=a.deviation_score < recommend_below,
            value=a.value,
        )
        for a in alternatives
    ]


def _ranked(alternatives: list[AlternativeSuggestion]) -> list[AlternativeSuggestion]:
    return sorted(alternatives, key=lambda a: a.deviation_score)[:MAX_ALTERNATIVES]


class ConstraintValidator:
    """Validates design intents against a pixel map.

    Args:
        pixel_map: Roofline layout.
        config: Composition tunables (contrast threshold, pixel limit).

    Example:
        >>> result = ConstraintValidator(pixel_map).validate(intent)
        >>> intent = result.attach_to(intent)
    """

    def __init__(self, pixel_map: PixelMap, config: CompositionConfig | None = None) -> None:
        self._pixel_map = pixel_map
        self._config = config or CompositionConfig()
        self._resolver = ZoneResolver(pixel_map)
        self._spacing_checks = {
            SpacingType.PATTERN: self._check_pattern,
            SpacingType.EQUALLY_SPACED: self._check_equally_spaced,
            SpacingType.EVERY_NTH: self._check_every_nth,
            SpacingType.ANCHORS_ONLY: self._check_anchors_only,
            SpacingType.CONTINUOUS: self._check_continuous,
        }

    def validate(self, intent: DesignIntent) -> ValidationResult:
        """Run every check against ``intent``.

        Args:
            intent: Intent to validate. Not modified.

        Returns:
            ValidationResult with constraints and new ambiguity flags.
        """
        constraints: list[DesignConstraint] = []
        ambiguities: list[AmbiguityFlag] = []

        constraints.append(self._check_pixel_limit())

        resolved: dict[str, list[PixelRange]] = {}
        total = self._pixel_map.total_pixel_count
        for layer in intent.enabled_layers:
            ranges = self._resolver.resolve(layer.target_zone)
            on_strip = [r for r in ranges if r.start < total]
            resolved[layer.id] = on_strip
            missing = self._resolver.missing_segment_ids(layer.target_zone)

            if not on_strip:
                constraint, flag = self._empty_zone(layer, missing)
                constraints.append(constraint)
                ambiguities.append(flag)
                continue
            constraints.extend(self._check_zone_references(layer, on_strip, missing))
            constraints.append(_satisfied(ConstraintType.ZONE_EXISTS, layer.id))

            rule = layer.colors.spacing_rule
            if rule is not None:
                constraint, flag = self._spacing_checks[rule.type](layer, rule, on_strip)
                constraints.append(constraint)
                if flag is not None:
                    ambiguities.append(flag)

        overlap_constraints, overlap_flags = self._check_overlaps(intent.enabled_layers, resolved)
        constraints.extend(overlap_constraints)
        ambiguities.extend(overlap_flags)

        ambiguities = [flag.model_copy(update={"from_validation": True}) for flag in ambiguities]
        result = ValidationResult(constraints=constraints, additional_ambiguities=ambiguities)
        logger.debug(
            f"Validated {len(intent.layers)} layer(s): {len(result.unsatisfied)} unsatisfied, "
            f"{len(ambiguities)} new ambiguity(ies)"
        )
        return result

    # ------------------------------------------------------------------
    # Map-level and zone checks
    # ------------------------------------------------------------------

    def _check_pixel_limit(self) -> DesignConstraint:
        total = self._pixel_map.total_pixel_count
        if total > self._config.max_pixels:
            return DesignConstraint(
                type=ConstraintType.PIXEL_COUNT,
                is_satisfied=False,
                failure_reason=f"Roofline has {total} pixels; the limit is {self._config.max_pixels}",
            )
        return _satisfied(ConstraintType.PIXEL_COUNT, None)

    def _check_zone_references(
        self, layer: DesignLayer, ranges: list[PixelRange], missing: list[str]
    ) -> list[DesignConstraint]:
        """Advisories for a zone that resolves but is partly unknown or off the strip."""
        constraints = []
        if missing:
            constraints.append(
                DesignConstraint(
                    type=ConstraintType.ZONE_EXISTS,
                    is_satisfied=False,
                    failure_reason=f"Segment(s) not found: {', '.join(missing)}",
                    layer_id=layer.id,
                    advisory=True,
                )
            )

        total = self._pixel_map.total_pixel_count
        if any(r.end >= total for r in ranges):
            constraints.append(
                DesignConstraint(
                    type=ConstraintType.PIXEL_COUNT,
                    is_satisfied=False,
                    failure_reason=(
                        f'Layer "{layer.label}" targets pixels beyond {total - 1}; '
                        "they will be ignored"
                    ),
                    layer_id=layer.id,
                    advisory=True,
                )
            )
        return constraints

    def _zone_alternatives(self) -> list[AlternativeSuggestion]:
        peaks = self._pixel_map.segments_of_type(SegmentType.PEAK)
        corners = self._pixel_map.segments_of_type(SegmentType.CORNER)
        runs = self._pixel_map.segments_of_type(SegmentType.RUN)

        alternatives: list[AlternativeSuggestion] = []
        if peaks:
            alternatives.append(
                AlternativeSuggestion(
                    id="peaks",
                    label=f"Peaks ({len(peaks)})",
                    description="All peak/gable segments",
                    value=ZoneSelector.architectural([ArchitecturalRole.PEAK]),
                    deviation_score=0.3,
                )
            )
        if corners:
            alternatives.append(
                AlternativeSuggestion(
                    id="corners",
                    label=f"Corners ({len(corners)})",
                    description="All corner segments",
                    value=ZoneSelector.architectural([ArchitecturalRole.CORNER]),
                    deviation_score=0.3,
                )
            )
        if runs:
            alternatives.append(
                AlternativeSuggestion(
                    id="runs",
                    label=f"Runs ({len(runs)})",
                    description="Horizontal run segments",
                    value=ZoneSelector.architectural([ArchitecturalRole.RUN]),
                    deviation_score=0.4,
                )
            )
        alternatives.append(
            AlternativeSuggestion(
                id="all",
                label="Entire roofline",
                description="Apply to all segments",
                value=ZoneSelector.all(),
                deviation_score=0.5,
            )
        )
        return alternatives

    def _empty_zone(
        self, layer: DesignLayer, missing: list[str]
    ) -> tuple[DesignConstraint, AmbiguityFlag]:
        alternatives = self._zone_alternatives()
        reason = f'Zone "{layer.target_zone.description}" matches no pixels on this roofline'
        if missing:
            reason += f" (segment(s) not found: {', '.join(missing)})"
        constraint = DesignConstraint(
            type=ConstraintType.ZONE_EXISTS,
            is_satisfied=False,
            failure_reason=reason,
            alternatives=alternatives,
            layer_id=layer.id,
        )
        flag = AmbiguityFlag(
            type=AmbiguityType.ZONE_AMBIGUITY,
            description=reason,
            choices=_choices(alternatives, recommend_below=0.0),
            affected_layer_id=layer.id,
            source_clause=layer.target_zone.description,
        )
        return constraint, flag

    # ------------------------------------------------------------------
    # Spacing checks (per resolved range; first failing range reports)
    # ------------------------------------------------------------------

    def _spacing_failure(
        self,
        layer: DesignLayer,
        reason: str,
        description: str,
        alternatives: list[AlternativeSuggestion],
        recommend_below: float = 0.0,
    ) -> tuple[DesignConstraint, AmbiguityFlag | None]:
        ranked = _ranked(alternatives)
        constraint = DesignConstraint(
            type=ConstraintType.SPACING_MATH,
            is_satisfied=False,
            failure_reason=reason,
            alternatives=ranked,
            layer_id=layer.id,
        )
        if not ranked:
            return constraint, None
        flag = AmbiguityFlag(
            type=AmbiguityType.SPACING_IMPOSSIBLE,
            description=description,
            choices=_choices(ranked, recommend_below),
            affected_layer_id=layer.id,
            source_clause=layer.colors.spacing_rule.description if layer.colors.spacing_rule else None,
        )
        return constraint, flag

    @staticmethod
    def _distinct_lengths(ranges: list[PixelRange]) -> list[int]:
        lengths: list[int] = []
        for r in ranges:
            if r.length not in lengths:
                lengths.append(r.length)
        return lengths

    def _check_pattern(
        self, layer: DesignLayer, rule: SpacingRule, ranges: list[PixelRange]
    ) -> tuple[DesignConstraint, AmbiguityFlag | None]:
        on, off = rule.on_count, rule.off_count
        cycle = on + off
        if cycle <= 0:
            return self._spacing_failure(
                layer, "On and off counts cannot both be zero", "", alternatives=[]
            )

        for pixels in self._distinct_lengths(ranges):
            full_cycles, remainder = divmod(pixels, cycle)
            if remainder <= on:
                continue

            alternatives: list[AlternativeSuggestion] = []
            off_base = max(off, 1)
            if full_cycles > 0:
                stretched = math.ceil(pixels / full_cycles - on)
                if stretched > 0 and stretched != off:
                    alternatives.append(
                        AlternativeSuggestion(
                            id="stretch",
                            label=f"{on} on, {stretched} off",
                            description="Slightly larger gaps for even distribution",
                            value=SpacingRule.pattern(on, stretched, rule.start_with_on),
                            deviation_score=abs(stretched - off) / off_base,
                        )
                    )
            compressed = math.floor(pixels / (full_cycles + 1) - on)
            if compressed > 0 and compressed != off:
                alternatives.append(
                    AlternativeSuggestion(
                        id="compress",
                        label=f"{on} on, {compressed} off",
                        description="Tighter spacing with more lit LEDs",
                        value=SpacingRule.pattern(on, compressed, rule.start_with_on),
                        deviation_score=abs(compressed - off) / off_base,
                    )
                )
            alternatives.append(
                AlternativeSuggestion(
                    id="original",
                    label=f"{on} on, {off} off (with remainder)",
                    description=f"{remainder} extra pixels at the end",
                    value=rule,
                    deviation_score=0.1,
                )
            )
            return self._spacing_failure(
                layer,
                f"{pixels} pixels with {on} on, {off} off leaves {remainder} extra",
                f"The {on} on, {off} off pattern doesn't divide evenly into {pixels} pixels",
                alternatives,
            )

        return _satisfied(ConstraintType.SPACING_MATH, layer.id), None

    def _check_equally_spaced(
        self, layer: DesignLayer, rule: SpacingRule, ranges: list[PixelRange]
    ) -> tuple[DesignConstraint, AmbiguityFlag | None]:
        requested = rule.on_count
        if requested <= 0:
            return self._spacing_failure(
                layer, "Requested count must be positive", "", alternatives=[]
            )

        for pixels in self._distinct_lengths(ranges):
            if requested > pixels:
                alternatives = [
                    AlternativeSuggestion(
                        id="max",
                        label=f"Use all {pixels} pixels",
                        description="Every pixel lit",
                        value=SpacingRule.continuous(),
                        deviation_score=0.5,
                    )
                ]
                if pixels // 2 >= 1:
                    alternatives.append(
                        AlternativeSuggestion(
                            id="half",
                            label=f"Use {pixels // 2} pixels",
                            description="Half the available pixels",
                            value=SpacingRule.equally_spaced(pixels // 2),
                            deviation_score=0.3,
                        )
                    )
                return self._spacing_failure(
                    layer,
                    f"Requested {requested} LEDs but only {pixels} available",
                    f"{requested} equally spaced LEDs won't fit in {pixels} pixels",
                    alternatives,
                )

            if requested == 1 or _is_even_spacing(pixels, requested):
                continue

            alternatives = self._equal_spacing_alternatives(pixels, requested)
            if not alternatives:
                return (
                    DesignConstraint(
                        type=ConstraintType.SPACING_MATH,
                        is_satisfied=False,
                        failure_reason=(
                            f"{requested} equally spaced LEDs in {pixels} pixels "
                            "will have slightly uneven gaps"
                        ),
                        layer_id=layer.id,
                        advisory=True,
                    ),
                    None,
                )
            return self._spacing_failure(
                layer,
                f"{requested} equally spaced LEDs in {pixels} pixels gives uneven spacing",
                f"{requested} equally spaced LEDs doesn't divide evenly into {pixels} pixels",
                alternatives,
                recommend_below=0.1,
            )

        return _satisfied(ConstraintType.SPACING_MATH, layer.id), None

    @staticmethod
    def _equal_spacing_alternatives(pixels: int, requested: int) -> list[AlternativeSuggestion]:
        alternatives = []
        for count in range(requested - 3, requested + 4):
            if count <= 1 or count > pixels or count == requested:
                continue
            if not _is_even_spacing(pixels, count):
                continue
            spacing = round((pixels - 1) / (count - 1))
            more = count > requested
            alternatives.append(
                AlternativeSuggestion(
                    id=f"count_{count}",
                    label=f"{count} LEDs (every {spacing} pixels)",
                    description=(
                        f"{count - requested} more than requested"
                        if more
                        else f"{requested - count} fewer than requested"
                    ),
                    value=SpacingRule.equally_spaced(count),
                    deviation_score=abs(count - requested) / requested,
                )
            )
        return alternatives

    def _check_every_nth(
        self, layer: DesignLayer, rule: SpacingRule, ranges: list[PixelRange]
    ) -> tuple[DesignConstraint, AmbiguityFlag | None]:
        interval = rule.effective_interval
        if interval <= 0:
            return self._spacing_failure(layer, "Interval must be positive", "", alternatives=[])

        for pixels in self._distinct_lengths(ranges):
            remainder = pixels % interval
            if remainder <= interval // 2:
                continue

            alternatives = []
            for candidate in range(interval - 2, interval + 3):
                if candidate <= 0 or candidate == interval:
                    continue
                new_remainder = pixels % candidate
                if new_remainder < remainder and new_remainder <= candidate // 2:
                    alternatives.append(
                        AlternativeSuggestion(
                            id=f"interval_{candidate}",
                            label=f"Every {candidate} pixels",
                            description=f"{math.ceil(pixels / candidate)} lit LEDs",
                            value=SpacingRule.every_nth(candidate),
                            deviation_score=abs(candidate - interval) / interval,
                        )
                    )
            if not alternatives:
                # Nothing divides better; accept as-is.
                continue
            return self._spacing_failure(
                layer,
                f"Every {interval} pixels has uneven ending",
                f"Every {interval} pixels leaves {remainder} unused at the end of {pixels} pixels",
                alternatives,
            )

        return _satisfied(ConstraintType.SPACING_MATH, layer.id), None

    def _check_anchors_only(
        self, layer: DesignLayer, rule: SpacingRule, ranges: list[PixelRange]
    ) -> tuple[DesignConstraint, AmbiguityFlag | None]:
        has_anchor = any(
            r.start <= anchor <= r.end
            for r in ranges
            for anchor in self._pixel_map.all_global_anchor_pixels
        )
        if has_anchor:
            return _satisfied(ConstraintType.SPACING_MATH, layer.id), None
        return (
            DesignConstraint(
                type=ConstraintType.SPACING_MATH,
                is_satisfied=False,
                failure_reason=f'Layer "{layer.label}" uses anchors only but its zone has no anchors',
                layer_id=layer.id,
                advisory=True,
            ),
            None,
        )

    def _check_continuous(
        self, layer: DesignLayer, rule: SpacingRule, ranges: list[PixelRange]
    ) -> tuple[DesignConstraint, AmbiguityFlag | None]:
        return _satisfied(ConstraintType.SPACING_MATH, layer.id), None

    # ------------------------------------------------------------------
    # Cross-layer checks
    # ------------------------------------------------------------------

    def _check_overlaps(
        self, layers: list[DesignLayer], resolved: dict[str, list[PixelRange]]
    ) -> tuple[list[DesignConstraint], list[AmbiguityFlag]]:
        constraints: list[DesignConstraint] = []
        flags: list[AmbiguityFlag] = []
        flagged_layers: set[str] = set()

        for i, first in enumerate(layers):
            for j in range(i + 1, len(layers)):
                second = layers[j]
                if not _ranges_overlap(resolved.get(first.id, []), resolved.get(second.id, [])):
                    continue

                first_color = first.colors.primary_color
                second_color = second.colors.primary_color
                if contrast(first_color, second_color) < self._config.contrast_threshold:
                    constraints.append(
                        DesignConstraint(
                            type=ConstraintType.COLOR_CONTRAST,
                            is_satisfied=False,
                            failure_reason=(
                                f"Colors in layers {i + 1} and {j + 1} may be hard to distinguish"
                            ),
                            alternatives=[
                                AlternativeSuggestion(
                                    id="keep",
                                    label="Keep both colors",
                                    description="Low contrast may be intentional",
                                    deviation_score=0.0,
                                ),
                                AlternativeSuggestion(
                                    id="brighten",
                                    label="Increase brightness difference",
                                    description="Make one color brighter",
                                    deviation_score=0.2,
                                ),
                            ],
                            layer_id=second.id,
                            advisory=True,
                        )
                    )

                if first.priority != second.priority or first_color == second_color:
                    continue
                if second.id in flagged_layers:
                    continue
                flagged_layers.add(second.id)
                constraint, flag = self._priority_conflict(first, second)
                constraints.append(constraint)
                flags.append(flag)

        return constraints, flags

    @staticmethod
    def _priority_conflict(
        first: DesignLayer, second: DesignLayer
    ) -> tuple[DesignConstraint, AmbiguityFlag]:
        reason = (
            f'Layers "{first.label}" and "{second.label}" overlap with equal priority '
            f"{first.priority}"
        )
        alternatives = [
            AlternativeSuggestion(
                id="second_on_top",
                label=f'"{second.label}" on top',
                description="Later layer wins where they overlap",
                value=1,
                deviation_score=0.0,
            ),
            AlternativeSuggestion(
                id="first_on_top",
                label=f'"{first.label}" on top',
                description="Earlier layer wins where they overlap",
                value=-1,
                deviation_score=0.1,
            ),
        ]
        constraint = DesignConstraint(
            type=ConstraintType.ZONE_OVERLAP,
            is_satisfied=False,
            failure_reason=reason,
            alternatives=alternatives,
            layer_id=second.id,
        )
        flag = AmbiguityFlag(
            type=AmbiguityType.CONFLICT_RESOLUTION,
            description=reason,
            choices=_choices(alternatives, recommend_below=0.05),
            affected_layer_id=second.id,
        )
        return constraint, flag


def _is_even_spacing(pixels: int, count: int) -> bool:
    spacing = (pixels - 1) / (count - 1)
    return abs(spacing - round(spacing)) < 0.01


def _ranges_overlap(a: list[PixelRange], b: list[PixelRange]) -> bool:
    return any(x.intersects(y) for x in a for y in b)


__all__ = ["ConstraintValidator", "ValidationResult"]
