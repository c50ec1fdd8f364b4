"""Rutas administrativas: estadísticas, aprobaciones y exportaciones."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from taskboard.application.use_cases import get_admin_snapshot, list_recent_todos
from taskboard.application.use_cases.todos import export_all_todos
from taskboard.application.use_cases.users import (
    get_user,
    list_pending_users,
    list_users,
    review_user,
)
from taskboard.domain.entities import User
from taskboard.infrastructure.database import get_db
from taskboard.interfaces.api.dependencies import require_admin
from taskboard.interfaces.api.schemas import (
    AdminSnapshotRead,
    PendingUserRead,
    RecentTodoRead,
    UserRead,
    UserReviewRequest,
    UserReviewResponse,
)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=AdminSnapshotRead)
def read_stats(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Devuelve los contadores del panel junto con pendientes y tareas recientes."""

    snapshot = get_admin_snapshot(db)
    stats = snapshot.stats
    return AdminSnapshotRead(
        total_users=stats.total_users,
        pending_users=stats.pending_users,
        total_todos=stats.total_todos,
        completed_todos=stats.completed_todos,
        completion_rate=stats.completion_rate,
        pending=[PendingUserRead.model_validate(item) for item in snapshot.pending],
        recent_todos=[RecentTodoRead.model_validate(item) for item in snapshot.recent_todos],
    )


@router.get("/pending-users", response_model=list[PendingUserRead])
def read_pending_users(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Lista los registros que esperan aprobación."""

    return [PendingUserRead.model_validate(item) for item in list_pending_users(db)]


@router.get("/recent-todos", response_model=list[RecentTodoRead])
def read_recent_todos(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Devuelve las diez tareas más recientes de todos los usuarios."""

    return [RecentTodoRead.model_validate(item) for item in list_recent_todos(db)]


@router.get("/users", response_model=list[UserRead])
def read_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Devuelve una lista de usuarios registrados."""

    return [UserRead.model_validate(user) for user in list_users(db, skip=skip, limit=limit)]


@router.post("/review-user", response_model=UserReviewResponse)
def review_user_endpoint(
    payload: UserReviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Aprueba o rechaza (elimina) una cuenta pendiente."""

    try:
        get_user(db, payload.user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    try:
        review_user(
            db, user_id=payload.user_id, approve=payload.approved, reviewer=current_user
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    message = "User approved successfully" if payload.approved else "User rejected and removed"
    return UserReviewResponse(user_id=payload.user_id, approved=payload.approved, message=message)


@router.get("/export-todos")
def export_todos_endpoint(
    format: str = Query("csv", pattern="^(json|csv)$"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> Response:
    """Exporta todas las tareas del sistema con los datos de su propietario."""

    try:
        export = export_all_todos(db, export_format=format)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
