"""
Core components for the audit pipeline.

Contains:
- Data models (snapshot inputs, derived artifacts, AuditResult)
- Error taxonomy
- RuleChecklist evaluator
- ByteSavingsEstimator
- Audit runner
"""
