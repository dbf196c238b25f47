from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from foodorder.api.container import AppContainer, get_container
from foodorder.application.dto.responses import MenuResponse
from foodorder.application.use_cases.browse_menu import BrowseMenu
from foodorder.domain.common.ids import RestaurantId

router = APIRouter()


def _browse_menu_use_case(container: AppContainer) -> BrowseMenu:
    return BrowseMenu(
        repository=container.dish_repository,
        cache=container.cache,
        ttl_seconds=container.menu_cache_ttl_seconds,
    )


@router.get("/v1/restaurants/{restaurant_id}/dishes", response_model=MenuResponse)
def list_dishes(
    restaurant_id: str,
    category: str | None = Query(default=None),
    tag: list[str] = Query(default=[]),
    container: AppContainer = Depends(get_container),
) -> MenuResponse:
    return _browse_menu_use_case(container).execute(
        RestaurantId(restaurant_id),
        category=category or None,
        tags=tag,
    )
