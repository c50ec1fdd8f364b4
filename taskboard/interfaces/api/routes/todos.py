"""Rutas para administrar las tareas del usuario autenticado."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from taskboard.application.use_cases.todos import (
    bulk_update_todos,
    create_todo,
    delete_todo,
    export_user_todos,
    get_todo,
    list_todos,
    toggle_todo,
    update_todo,
)
from taskboard.domain.entities import Todo, User
from taskboard.infrastructure.database import get_db
from taskboard.interfaces.api.dependencies import get_current_active_user
from taskboard.interfaces.api.schemas import (
    BulkActionRequest,
    BulkActionResponse,
    TodoCreate,
    TodoRead,
    TodoToggle,
    TodoUpdate,
)

router = APIRouter(prefix="/todos", tags=["todos"])


def _to_read_model(todo: Todo) -> TodoRead:
    return TodoRead.model_validate(todo)


def _ensure_owned(db: Session, todo_id: int, owner: User) -> Todo:
    try:
        return get_todo(db, todo_id=todo_id, owner=owner)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/", response_model=list[TodoRead])
def read_todos(
    filter: str = Query("all", pattern="^(all|completed|pending)$"),
    search: str | None = Query(None, max_length=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Devuelve las tareas del usuario filtradas por estado y texto."""

    try:
        todos = list_todos(db, owner=current_user, status_filter=filter, search=search)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [_to_read_model(todo) for todo in todos]


@router.post("/", response_model=TodoRead, status_code=status.HTTP_201_CREATED)
def create_todo_endpoint(
    todo_in: TodoCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Crea una nueva tarea para el usuario autenticado."""

    try:
        todo = create_todo(
            db,
            owner=current_user,
            title=todo_in.title,
            description=todo_in.description,
            due_date=todo_in.due_date,
            tags=todo_in.tags,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_read_model(todo)


@router.get("/export")
def export_todos_endpoint(
    format: str = Query("json", pattern="^(json|csv)$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    """Exporta todas las tareas del usuario en formato JSON o CSV."""

    try:
        export = export_user_todos(db, owner=current_user, export_format=format)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.patch("/bulk", response_model=BulkActionResponse)
def bulk_action(
    payload: BulkActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Completa o elimina varias tareas del usuario en una sola operación."""

    try:
        result = bulk_update_todos(
            db, owner=current_user, todo_ids=payload.ids, action=payload.action
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return BulkActionResponse(success=True, message=result.message, count=result.count)


@router.get("/{todo_id}", response_model=TodoRead)
def read_todo(
    todo_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Obtiene la tarea identificada por ``todo_id``."""

    return _to_read_model(_ensure_owned(db, todo_id, current_user))


@router.put("/{todo_id}", response_model=TodoRead)
def update_todo_endpoint(
    todo_id: int,
    todo_in: TodoUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Actualiza los datos de una tarea existente."""

    _ensure_owned(db, todo_id, current_user)
    changes = todo_in.model_dump(exclude_unset=True)
    if changes.get("title", "") is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")
    try:
        todo = update_todo(db, todo_id=todo_id, owner=current_user, changes=changes)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_read_model(todo)


@router.post("/{todo_id}/toggle", response_model=TodoRead)
def toggle_todo_endpoint(
    todo_id: int,
    payload: TodoToggle | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Marca la tarea como completada o pendiente."""

    _ensure_owned(db, todo_id, current_user)
    completed = payload.completed if payload is not None else None
    try:
        todo = toggle_todo(db, todo_id=todo_id, owner=current_user, completed=completed)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_read_model(todo)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo_endpoint(
    todo_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Elimina la tarea indicada."""

    _ensure_owned(db, todo_id, current_user)
    try:
        delete_todo(db, todo_id=todo_id, owner=current_user)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
