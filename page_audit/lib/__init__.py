"""Support helpers: CSS colors, manifest icons, URLs."""
