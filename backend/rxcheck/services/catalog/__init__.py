from .drug_catalog import DrugCatalogClient

__all__ = ['DrugCatalogClient']
