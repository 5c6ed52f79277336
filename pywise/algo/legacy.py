"""Legacy pairwise generation, kept for comparison.

Instead of seeding each combination from one candidate pair, this variant
starts from an empty combination and merges candidate pairs into it one by
one. Candidates that clash with what has been merged so far are deferred
and returned to the queue for the next combination.
"""

from __future__ import annotations

import logging

from pywise.algo.pairwise import DEFAULT_JUMP, PairCandidateAlgorithm
from pywise.core.combination import Combination, CombinationTable
from pywise.core.parameter import ParameterSet
from pywise.errors import InvalidInputError, NoCandidatesError

logger = logging.getLogger(__name__)


class LegacyPairwiseAlgorithm(PairCandidateAlgorithm):
    """Merge-based pairwise generation.

    Example:
        >>> table = LegacyPairwiseAlgorithm(jump=2, seed=7).generate(parameter_set)
    """

    def __init__(self, jump: int = DEFAULT_JUMP, seed: int | None = None) -> None:
        super().__init__(jump=jump, seed=seed)

    def generate(self, parameter_set: ParameterSet) -> CombinationTable:
        if parameter_set is None or len(parameter_set) == 0:
            raise InvalidInputError("Parameter set must contain at least one parameter")

        logger.info(f"Starting legacy pairwise test generation with jump value {self.jump}")
        table = CombinationTable()

        if len(parameter_set) == 1:
            for partition in parameter_set[0].partitions:
                table.add(Combination.of(parameter_set, {0: partition}))
            return table

        self.generate_candidates(parameter_set)
        while self.queue:
            combination = self._build_combination(parameter_set, table)
            logger.debug(
                f"Progress result: {len(table)} queue: {len(self.queue)} -- {combination.key}"
            )

        logger.info(f"Completed legacy pairwise test generation with {len(table)} test cases")
        return table

    def _build_combination(
        self,
        parameter_set: ParameterSet,
        table: CombinationTable,
    ) -> Combination:
        offset = -self.jump
        current = Combination(parameter_set)
        deferred: list[Combination] = []
        merged: list[Combination] = []

        while not current.is_filled and self.queue:
            offset = (offset + self.jump) % len(self.queue)
            candidate = self.queue.pop(offset)
            if self.is_covered(candidate):
                continue
            if not self.check_no_conflicts(candidate):
                deferred.append(candidate)
                continue

            combined = current.merge(candidate)
            if combined is None or not self.check_no_conflicts(combined):
                logger.debug(
                    f"Postponing {candidate.key}. Merge conflict? {combined is None}; "
                    f"incompatible values? {combined is not None}"
                )
                deferred.append(candidate)
                continue

            current = combined
            merged.append(candidate)

        if not merged:
            if deferred:
                raise NoCandidatesError(
                    f"No candidate could be merged; {len(deferred)} conflicting candidates remain",
                    remaining=len(deferred),
                )
            # Only covered candidates were left in the queue.
            return current

        self.queue.extend(deferred)

        if self.complete_combination(current):
            table.add(current)
            self.mark_covered(current)
        else:
            logger.warning(f"Keeping degraded result {current.key}")
            table.add_incomplete(current)
            # Give every merged pair but the first another chance.
            self.queue.extend(merged[1:])
        return current
