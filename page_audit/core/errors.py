"""
Error taxonomy for audit evaluation.

Both classes resolve locally into a failing AuditResult; anything else raised
during evaluation is a programming defect.
"""


class AuditError(Exception):
    """Базовая ошибка аудита, превращается в проваленный AuditResult."""


class MissingPrerequisite(AuditError):
    """Структурное требование отсутствует (нет manifest, нет маркера в trace, нет FCP)."""


class MalformedInput(AuditError):
    """Поле присутствует, но не разбирается (невалидный JSON, невалидный цвет)."""
