"""
Palettekit Colors Module

Provides the distance metric, k-means++ clustering, palette
post-processing and the extraction pipeline that ties them together.
"""

__version__ = "1.0.0"
