"""Menu service: menu CRUD, image handling and the create-with-QR saga."""

import enum
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

import structlog

from qrbites.application.services.qr_code_service import build_menu_public_url, generate_menu_qr_code
from qrbites.application.services.restaurant_service import ensure_owned
from qrbites.core.exceptions import BadRequestError
from qrbites.core.pagination import Page, QueryPolicy
from qrbites.domain.models.menu import Menu
from qrbites.domain.models.user import User
from qrbites.domain.repositories.menu_repository import MenuRepository
from qrbites.domain.schemas.menu import MenuCreate, MenuUpdate
from qrbites.infrastructure.cache import CacheBackend, invalidate_public_routes
from qrbites.infrastructure.cloudinary_api import CloudinaryClient

logger = structlog.get_logger(__name__)

MENU_POLICY = QueryPolicy(
    exact_match=("restaurantId",),
    regex_match=("name",),
    allowed_sort_fields=("name", "createdAt", "updatedAt"),
)


class SagaState(str, enum.Enum):
    CREATED = "created"
    QR_PENDING = "qr_pending"
    QR_ATTACHED = "qr_attached"
    QR_FAILED = "qr_failed"
    ROLLED_BACK = "rolled_back"


class MenuCreationSaga:
    """
    Persist a menu, then attach its QR code.

    CREATED -> QR_PENDING -> QR_ATTACHED on success.
    CREATED -> QR_PENDING -> QR_FAILED -> ROLLED_BACK when the QR step fails:
    the menu row is deleted and the original error re-raised, so no menu
    without a QR code is left behind.
    """

    def __init__(self, repo: MenuRepository, storage: CloudinaryClient, cache: CacheBackend, user: User):
        self.repo = repo
        self.storage = storage
        self.cache = cache
        self.user = user
        self.state: Optional[SagaState] = None
        self.menu: Optional[Menu] = None
        self.menu_id: Optional[int] = None

    def _transition(self, state: SagaState, **context: Any) -> None:
        logger.info(
            "Menu creation saga",
            state=state.value,
            previous=self.state.value if self.state else None,
            menu_id=self.menu_id,
            user_id=self.user.id,
            **context,
        )
        self.state = state

    async def run(self, payload: MenuCreate, image_urls: List[str]) -> Menu:
        data = payload.model_dump()
        if image_urls:
            data["image_urls"] = list(image_urls)
            data["image_url"] = image_urls[0]

        self.menu = self.repo.create(data)
        self.menu_id = self.menu.id
        self._transition(SagaState.CREATED, restaurant_id=self.menu.restaurant_id)

        self._transition(SagaState.QR_PENDING)
        try:
            qr_code_url = await generate_menu_qr_code(self.storage, self.menu.id, self.menu.restaurant_id)
        except Exception as e:
            self._transition(SagaState.QR_FAILED, error=str(e))
            self._compensate()
            raise

        self.menu = self.repo.update(self.menu, {"qr_code_url": qr_code_url})
        self._transition(SagaState.QR_ATTACHED, qr_code_url=qr_code_url)
        invalidate_public_routes(self.cache)
        return self.menu

    def _compensate(self) -> None:
        self.repo.delete(self.menu)
        self._transition(SagaState.ROLLED_BACK)


def list_menus(repo: MenuRepository, params: Mapping[str, Any], user: User,
               owned_ids: Optional[Iterable[int]]) -> Page[Menu]:
    criteria = []
    if not user.is_admin:
        requested = params.get("restaurantId")
        if requested:
            try:
                ensure_owned(user, owned_ids, int(requested))
            except ValueError:
                raise BadRequestError("Invalid restaurantId format") from None
        else:
            criteria.append(Menu.restaurant_id.in_(list(owned_ids or [])))
    return repo.find_page(params, MENU_POLICY, *criteria)


async def create_menu(repo: MenuRepository, storage: CloudinaryClient, cache: CacheBackend, user: User,
                      payload: MenuCreate, image_urls: List[str]) -> Menu:
    return await MenuCreationSaga(repo, storage, cache, user).run(payload, image_urls)


def update_menu(repo: MenuRepository, cache: CacheBackend, user: User, menu: Menu,
                payload: MenuUpdate, image_urls: List[str]) -> Menu:
    data = payload.model_dump(exclude_unset=True)
    if image_urls:
        data["image_urls"] = list(image_urls)
        data["image_url"] = image_urls[0]

    menu = repo.update(menu, data)
    invalidate_public_routes(cache)
    logger.info("Menu updated", menu_id=menu.id, user_id=user.id)
    return menu


def delete_menu(repo: MenuRepository, cache: CacheBackend, user: User, menu: Menu) -> None:
    """Delete a menu and its items."""
    menu_id = menu.id
    repo.delete(menu)
    invalidate_public_routes(cache)
    logger.info("Menu deleted", menu_id=menu_id, user_id=user.id)


def set_image(repo: MenuRepository, cache: CacheBackend, user: User, menu: Menu, image_url: str) -> Menu:
    menu = repo.update(menu, {"image_url": image_url})
    invalidate_public_routes(cache)
    logger.info("Menu image updated", menu_id=menu.id, user_id=user.id)
    return menu


async def regenerate_qr_code(repo: MenuRepository, storage: CloudinaryClient, cache: CacheBackend,
                             user: User, menu: Menu) -> dict:
    """Render a fresh QR code; the URL it encodes does not change."""
    qr_code_url = await generate_menu_qr_code(storage, menu.id, menu.restaurant_id)
    menu = repo.update(menu, {"qr_code_url": qr_code_url})
    invalidate_public_routes(cache)
    logger.info("QR code regenerated", menu_id=menu.id, user_id=user.id)

    return {
        "qr_code_url": qr_code_url,
        "qr_code_data": {
            "url": build_menu_public_url(menu.id, menu.restaurant_id),
            "download_url": qr_code_url,
            "public_url": qr_code_url,
            "generated_at": datetime.now(timezone.utc),
        },
    }
