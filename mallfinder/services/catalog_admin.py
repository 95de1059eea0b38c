"""Admin console operations on malls, stores and promotions."""

from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

from mallfinder.logging import get_logger
from mallfinder.logging.audit import AuditEventType, AuditLogger
from mallfinder.models.mall import Mall, MallInput
from mallfinder.models.promotion import Promotion, PromotionInput
from mallfinder.models.store import Category, Store, StoreInput
from mallfinder.security.permissions import Permission, PermissionChecker, PermissionDenied
from mallfinder.security.session import SessionContext
from mallfinder.storage.postgres_mall_repo import PostgresMallRepository
from mallfinder.storage.postgres_promotion_repo import PostgresPromotionRepository
from mallfinder.storage.postgres_store_repo import PostgresStoreRepository

logger = get_logger(__name__)

EDITABLE_MALL_FIELDS = {"name", "address", "latitude", "longitude", "description", "image"}
EDITABLE_STORE_FIELDS = {
    "name",
    "description",
    "floor",
    "location_in_mall",
    "contact_number",
    "logo_url",
    "hours",
    "categories",
}
EDITABLE_PROMOTION_FIELDS = {
    "title",
    "description",
    "promotion_type",
    "start_date",
    "end_date",
    "image",
}


class NotFoundError(LookupError):
    """Raised when an admin action targets a row that does not exist."""

    def __init__(self, resource_type: str, resource_id: UUID | str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} not found: {resource_id}")


def _check_fields(resource_type: str, changes: dict[str, Any], editable: set[str]) -> None:
    unknown = set(changes) - editable
    if unknown:
        raise ValueError(f"Unknown {resource_type} fields: {', '.join(sorted(unknown))}")


@dataclass
class CatalogOverview:
    """Ids an admin needs to address malls and categories."""

    malls: list[Mall]
    categories: list[Category]


@dataclass
class MallInventory:
    """A mall's stores and each store's promotions, for admin listings."""

    mall: Mall
    stores: list[Store]
    promotions: dict[UUID, list[Promotion]] = field(default_factory=dict)


class CatalogAdminService:
    """Create, edit and delete catalog entries on behalf of admins."""

    def __init__(
        self,
        mall_repo: PostgresMallRepository,
        store_repo: PostgresStoreRepository,
        promotion_repo: PostgresPromotionRepository,
        permissions: PermissionChecker,
    ):
        self.mall_repo = mall_repo
        self.store_repo = store_repo
        self.promotion_repo = promotion_repo
        self.permissions = permissions

    def _require_admin(self, session: SessionContext, action: str) -> None:
        if not self.permissions.can_manage_catalog(session.telegram_user_id, session.user):
            AuditLogger.log_permission_denied(session.telegram_user_id, action)
            raise PermissionDenied(Permission.MANAGE_CATALOG, session.telegram_user_id)

    async def create_mall(self, session: SessionContext, data: MallInput) -> Mall:
        self._require_admin(session, "create_mall")

        mall = await self.mall_repo.create(data, created_by=session.user_id)
        AuditLogger.log_catalog_change(
            AuditEventType.MALL_CREATED,
            session.telegram_user_id,
            "mall",
            mall.id,
            mall.name,
            metadata={"latitude": mall.latitude, "longitude": mall.longitude},
        )
        return mall

    async def update_mall(
        self, session: SessionContext, mall_id: UUID, changes: dict[str, Any]
    ) -> Mall:
        """Apply field changes to a mall.

        Raises:
            ValueError: for unknown fields or invalid values
            NotFoundError: if the mall does not exist
        """
        self._require_admin(session, "update_mall")

        _check_fields("mall", changes, EDITABLE_MALL_FIELDS)

        mall = await self.mall_repo.get_by_id(mall_id)
        if mall is None:
            raise NotFoundError("mall", mall_id)

        # Re-validate through the input model so coordinates stay in range
        merged = MallInput.model_validate({**mall.model_dump(), **changes})
        updated = mall.model_copy(update=merged.model_dump())

        saved = await self.mall_repo.update(updated)
        AuditLogger.log_catalog_change(
            AuditEventType.MALL_UPDATED,
            session.telegram_user_id,
            "mall",
            saved.id,
            saved.name,
            metadata={"fields": sorted(changes)},
        )
        return saved

    async def delete_mall(self, session: SessionContext, mall_id: UUID) -> bool:
        self._require_admin(session, "delete_mall")

        mall = await self.mall_repo.get_by_id(mall_id)
        if mall is None:
            raise NotFoundError("mall", mall_id)

        deleted = await self.mall_repo.delete(mall_id)
        if deleted:
            AuditLogger.log_catalog_change(
                AuditEventType.MALL_DELETED, session.telegram_user_id, "mall", mall_id, mall.name
            )
        return deleted

    async def create_store(self, session: SessionContext, data: StoreInput) -> Store:
        self._require_admin(session, "create_store")

        if await self.mall_repo.get_by_id(data.mall_id) is None:
            raise NotFoundError("mall", data.mall_id)

        store = await self.store_repo.create(data, created_by=session.user_id)
        AuditLogger.log_catalog_change(
            AuditEventType.STORE_CREATED,
            session.telegram_user_id,
            "store",
            store.id,
            store.name,
            metadata={"mall_id": str(data.mall_id), "categories": list(data.categories)},
        )
        return store

    async def update_store(
        self, session: SessionContext, store_id: UUID, changes: dict[str, Any]
    ) -> Store:
        """Apply field changes to a store.

        Raises:
            ValueError: for unknown fields or invalid values
            NotFoundError: if the store does not exist
        """
        self._require_admin(session, "update_store")
        _check_fields("store", changes, EDITABLE_STORE_FIELDS)

        store = await self.store_repo.get_by_id(store_id)
        if store is None:
            raise NotFoundError("store", store_id)

        merged = StoreInput.model_validate({**store.model_dump(), **changes})
        saved = await self.store_repo.update(store.model_copy(update=merged.model_dump()))
        AuditLogger.log_catalog_change(
            AuditEventType.STORE_UPDATED,
            session.telegram_user_id,
            "store",
            saved.id,
            saved.name,
            metadata={"fields": sorted(changes)},
        )
        return saved

    async def delete_store(self, session: SessionContext, store_id: UUID) -> bool:
        self._require_admin(session, "delete_store")

        store = await self.store_repo.get_by_id(store_id)
        if store is None:
            raise NotFoundError("store", store_id)

        deleted = await self.store_repo.delete(store_id)
        if deleted:
            AuditLogger.log_catalog_change(
                AuditEventType.STORE_DELETED, session.telegram_user_id, "store", store_id, store.name
            )
        return deleted

    async def create_promotion(self, session: SessionContext, data: PromotionInput) -> Promotion:
        self._require_admin(session, "create_promotion")

        if await self.store_repo.get_by_id(data.store_id) is None:
            raise NotFoundError("store", data.store_id)

        promotion = await self.promotion_repo.create(data, created_by=session.user_id)
        AuditLogger.log_catalog_change(
            AuditEventType.PROMOTION_CREATED,
            session.telegram_user_id,
            "promotion",
            promotion.id,
            promotion.title,
            metadata={"store_id": str(data.store_id), "end_date": data.end_date.isoformat()},
        )
        return promotion

    async def update_promotion(
        self, session: SessionContext, promotion_id: UUID, changes: dict[str, Any]
    ) -> Promotion:
        """Apply field changes to a promotion; the date range is checked again.

        Raises:
            ValueError: for unknown fields or invalid values
            NotFoundError: if the promotion does not exist
        """
        self._require_admin(session, "update_promotion")
        _check_fields("promotion", changes, EDITABLE_PROMOTION_FIELDS)

        promotion = await self.promotion_repo.get_by_id(promotion_id)
        if promotion is None:
            raise NotFoundError("promotion", promotion_id)

        merged = PromotionInput.model_validate({**promotion.model_dump(), **changes})
        saved = await self.promotion_repo.update(promotion.model_copy(update=merged.model_dump()))
        AuditLogger.log_catalog_change(
            AuditEventType.PROMOTION_UPDATED,
            session.telegram_user_id,
            "promotion",
            saved.id,
            saved.title,
            metadata={"fields": sorted(changes)},
        )
        return saved

    async def delete_promotion(self, session: SessionContext, promotion_id: UUID) -> bool:
        self._require_admin(session, "delete_promotion")

        promotion: Optional[Promotion] = await self.promotion_repo.get_by_id(promotion_id)
        if promotion is None:
            raise NotFoundError("promotion", promotion_id)

        deleted = await self.promotion_repo.delete(promotion_id)
        if deleted:
            AuditLogger.log_catalog_change(
                AuditEventType.PROMOTION_DELETED,
                session.telegram_user_id,
                "promotion",
                promotion_id,
                promotion.title,
            )
        return deleted

    async def overview(self, session: SessionContext) -> CatalogOverview:
        self._require_admin(session, "list_catalog")
        malls = await self.mall_repo.list_all()
        categories = await self.store_repo.list_categories()
        return CatalogOverview(malls=malls, categories=categories)

    async def mall_inventory(self, session: SessionContext, mall_id: UUID) -> MallInventory:
        """Stores of one mall with all their promotions, expired ones included.

        Raises:
            NotFoundError: if the mall does not exist
        """
        self._require_admin(session, "list_catalog")

        mall = await self.mall_repo.get_by_id(mall_id)
        if mall is None:
            raise NotFoundError("mall", mall_id)

        stores = await self.store_repo.list_by_mall(mall_id)
        promotions = await self.promotion_repo.list_by_stores([s.id for s in stores])
        return MallInventory(mall=mall, stores=stores, promotions=promotions)
