from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.apis.deps import (
    get_flashcards_service,
    get_repository,
    require_confirmation,
    unwrap,
)
from app.core.config import settings
from app.modules.flashcards import FlashcardRepository, FlashcardsService, SyncStatus
from .schemas import (
    ActiveCategoryUpdate,
    CategoriesResponse,
    CategoryCreate,
    CategoryRead,
    CategoryRename,
    FlashcardCreate,
    FlashcardRead,
    FlashcardUpdate,
    FlipResponse,
    SyncResponse,
)


router = APIRouter()

PREFIX = f"/{settings.app.version}"


def _categories_response(repo: FlashcardRepository) -> CategoriesResponse:
    return CategoriesResponse(
        active_category_id=repo.active_category_id,
        categories=[CategoryRead.from_model(c) for c in repo.categories],
    )


def _card(repo: FlashcardRepository, card) -> FlashcardRead:
    return FlashcardRead.from_model(card, revealed=repo.is_revealed(card.id))


@router.get(f"{PREFIX}/categories", response_model=CategoriesResponse, tags=["categories"])
async def list_categories(
    repo: FlashcardRepository = Depends(get_repository),
) -> CategoriesResponse:
    return _categories_response(repo)


@router.post(
    f"{PREFIX}/categories",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    tags=["categories"],
)
async def create_category(
    req: CategoryCreate, repo: FlashcardRepository = Depends(get_repository)
) -> CategoryRead:
    return CategoryRead.from_model(unwrap(repo.add_category(req.name)))


@router.put(
    f"{PREFIX}/categories/active", response_model=CategoriesResponse, tags=["categories"]
)
async def select_category(
    req: ActiveCategoryUpdate, repo: FlashcardRepository = Depends(get_repository)
) -> CategoriesResponse:
    unwrap(repo.select_category(req.category_id))
    return _categories_response(repo)


@router.patch(
    f"{PREFIX}/categories/{{category_id}}", response_model=CategoryRead, tags=["categories"]
)
async def rename_category(
    category_id: str,
    req: CategoryRename,
    repo: FlashcardRepository = Depends(get_repository),
) -> CategoryRead:
    return CategoryRead.from_model(unwrap(repo.rename_category(category_id, req.name)))


@router.delete(
    f"{PREFIX}/categories/{{category_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_confirmation)],
    tags=["categories"],
)
async def delete_category(
    category_id: str, repo: FlashcardRepository = Depends(get_repository)
) -> None:
    unwrap(repo.delete_category(category_id))


@router.get(
    f"{PREFIX}/categories/{{category_id}}/flashcards",
    response_model=list[FlashcardRead],
    tags=["categories"],
)
async def list_category_flashcards(
    category_id: str, repo: FlashcardRepository = Depends(get_repository)
) -> list[FlashcardRead]:
    if repo.get_category(category_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category {category_id} not found",
        )
    return [_card(repo, f) for f in repo.list_by_category(category_id)]


@router.get(f"{PREFIX}/flashcards", response_model=list[FlashcardRead], tags=["flashcards"])
async def list_flashcards(
    repo: FlashcardRepository = Depends(get_repository),
) -> list[FlashcardRead]:
    return [_card(repo, f) for f in repo.flashcards]


@router.post(
    f"{PREFIX}/flashcards",
    response_model=FlashcardRead,
    status_code=status.HTTP_201_CREATED,
    tags=["flashcards"],
)
async def create_flashcard(
    req: FlashcardCreate, repo: FlashcardRepository = Depends(get_repository)
) -> FlashcardRead:
    card = unwrap(
        repo.add_flashcard(
            req.category_id, req.question, req.answer, req.answer_image, req.answer_pdf
        )
    )
    return _card(repo, card)


@router.patch(
    f"{PREFIX}/flashcards/{{flashcard_id}}", response_model=FlashcardRead, tags=["flashcards"]
)
async def update_flashcard(
    flashcard_id: str,
    req: FlashcardUpdate,
    repo: FlashcardRepository = Depends(get_repository),
) -> FlashcardRead:
    card = unwrap(repo.update_flashcard(flashcard_id, **req.model_dump(exclude_unset=True)))
    return _card(repo, card)


@router.delete(
    f"{PREFIX}/flashcards/{{flashcard_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_confirmation)],
    tags=["flashcards"],
)
async def delete_flashcard(
    flashcard_id: str, repo: FlashcardRepository = Depends(get_repository)
) -> None:
    unwrap(repo.delete_flashcard(flashcard_id))


@router.post(
    f"{PREFIX}/flashcards/{{flashcard_id}}/flip",
    response_model=FlipResponse,
    tags=["flashcards"],
)
async def flip_flashcard(
    flashcard_id: str, repo: FlashcardRepository = Depends(get_repository)
) -> FlipResponse:
    revealed = unwrap(repo.toggle_reveal(flashcard_id))
    return FlipResponse(id=flashcard_id, revealed=revealed)


@router.post(f"{PREFIX}/flashcards/sync", response_model=SyncResponse, tags=["flashcards"])
async def sync_flashcards(
    service: FlashcardsService = Depends(get_flashcards_service),
) -> SyncResponse:
    report = await service.sync()
    if report.status is SyncStatus.REJECTED:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=report.message)
    if report.status is SyncStatus.FAILED:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=report.message)
    return SyncResponse(
        status=report.status.value,
        imported=report.imported,
        skipped=report.skipped,
        categories_created=report.categories_created,
        active_category_id=report.active_category_id,
    )
