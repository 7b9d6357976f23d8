"""
Audit catalog.

Contains:
- webapp-install-banner - manifest + service worker installability
- splash-screen - custom splash screen readiness
- themed-omnibox - theme color in manifest and meta tag
- manifest-short-name-length - homescreen name fits
- uses-request-compression - uncompressed text responses
- first-contentful-paint - FCP from the page timeline
"""

from . import (
    compression,
    first_contentful_paint,
    installability,
    short_name_length,
    splash_screen,
    themed_omnibox,
)


DEFAULT_AUDITS = (
    installability.DEFINITION,
    splash_screen.DEFINITION,
    themed_omnibox.DEFINITION,
    short_name_length.DEFINITION,
    compression.DEFINITION,
    first_contentful_paint.DEFINITION,
)
