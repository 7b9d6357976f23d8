"""
Page Audit

Аудит снимка состояния веб-страницы (network records, trace, manifest,
DOM probes) по каталогу best-practice проверок:
- Installability (manifest + service worker)
- Splash screen / themed omnibox
- Сжатие текстовых ответов
- First contentful paint

Usage:
    from page_audit.orchestrator import run_audits
    results = run_audits(snapshot)
"""

__version__ = "1.0.0"
