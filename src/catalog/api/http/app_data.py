from dataclasses import dataclass

from src.catalog.core.services import DbSessionService, ProductService, StoreClient


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    store_client: StoreClient
    product_service: ProductService
