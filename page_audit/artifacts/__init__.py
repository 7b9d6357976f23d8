"""
Computed artifacts.

Contains:
- ArtifactCache - memoization of derived artifacts for one run
- PageTimeline - key events of one page load from a trace
- ManifestValues - manifest checklist
- CompressionCandidates - uncompressed text responses
"""
