"""
GraderMarket - Listing search for a road-grader and spare-parts marketplace.

Example:
    >>> from gradermarket.domains.search import CatalogSearchEngine, SearchQuery
    >>> engine = CatalogSearchEngine()
    >>> results = engine.search(catalog, SearchQuery(text="1R-0742", mode="partNumber"))
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
