"""
Declarative rule checklist.

A checklist is an ordered tuple of immutable ChecklistItem definitions.
Evaluation never touches the definitions; every run produces a fresh
ChecklistReport, so one checklist can be shared by concurrent runs.
"""

import logging
from typing import Any, Iterable, Tuple

from .models import ChecklistItem, ChecklistReport, ChecklistResult


logger = logging.getLogger(__name__)


def make_item(item_id: str, user_text: str, groups: Iterable[str], predicate, explain=None) -> ChecklistItem:
    """Удобный конструктор ChecklistItem."""
    return ChecklistItem(
        id=item_id,
        user_text=user_text,
        groups=frozenset(groups),
        predicate=predicate,
        explain=explain,
    )


class RuleChecklist:
    """
    Вычислитель упорядоченного чеклиста с prerequisite-группой.

    Элементы из prerequisite_group проверяются первыми, в объявленном
    порядке. Первый провал останавливает прогон: остальные предикаты могут
    полагаться на то, что prerequisite выполнен. Если все prerequisite
    прошли, проверяются все остальные элементы без short-circuit.
    """

    def __init__(self, items: Iterable[ChecklistItem], prerequisite_group: str = "validity"):
        self.items: Tuple[ChecklistItem, ...] = tuple(items)
        self.prerequisite_group = prerequisite_group

        ids = [item.id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate checklist item ids: {ids}")

    @property
    def prerequisites(self) -> Tuple[ChecklistItem, ...]:
        return tuple(i for i in self.items if self.prerequisite_group in i.groups)

    @property
    def remaining(self) -> Tuple[ChecklistItem, ...]:
        return tuple(i for i in self.items if self.prerequisite_group not in i.groups)

    def evaluate(self, subject: Any) -> ChecklistReport:
        """
        Проверить subject.

        Args:
            subject: Объект, который получают предикаты

        Returns:
            ChecklistReport; при провале prerequisite содержит только
            проверенные prerequisite элементы и short_circuited=True
        """
        results = []

        for item in self.prerequisites:
            result = self._evaluate_item(item, subject)
            results.append(result)
            if not result.passing:
                logger.debug(f"Checklist short-circuited on prerequisite {item.id}")
                return ChecklistReport(results=tuple(results), short_circuited=True)

        for item in self.remaining:
            results.append(self._evaluate_item(item, subject))

        return ChecklistReport(results=tuple(results))

    @staticmethod
    def _evaluate_item(item: ChecklistItem, subject: Any) -> ChecklistResult:
        passing = bool(item.predicate(subject))
        reason = None
        if not passing and item.explain is not None:
            reason = item.explain(subject)
        return ChecklistResult(
            id=item.id,
            user_text=item.user_text,
            groups=item.groups,
            passing=passing,
            reason=reason,
        )
