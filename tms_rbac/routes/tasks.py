import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from tms_rbac.db import get_db
from tms_rbac.models.enums import PermissionAction
from tms_rbac.models.task import Task
from tms_rbac.rbac.deps import OrgContext, require_perm
from tms_rbac.rbac.perms import FEATURE_TASKS
from tms_rbac.schemas.tasks import TaskCreateIn, TaskOut, TaskUpdateIn

router = APIRouter(prefix="/organizations/{org_id}/tasks", tags=["tasks"])

def _get_task(db: Session, org_id: int, task_id: uuid.UUID) -> Task:
    t = db.scalar(select(Task).where(Task.id == task_id, Task.org_id == org_id))
    if t is None:
        raise HTTPException(status_code=404, detail="task not found")
    return t

@router.post("", response_model=TaskOut)
def create_task(
    org_id: int,
    payload: TaskCreateIn,
    ctx: OrgContext = Depends(require_perm(FEATURE_TASKS, PermissionAction.create)),
    db: Session = Depends(get_db),
) -> TaskOut:
    # owner and org come from the request context, never the body
    t = Task(
        org_id=org_id,
        owner_id=ctx.user.id,
        title=payload.title,
        description=payload.description,
        is_completed=payload.is_completed,
        category=payload.category,
    )
    db.add(t)
    db.commit()
    db.refresh(t)
    return TaskOut.model_validate(t)

@router.get("", response_model=list[TaskOut])
def list_tasks(
    org_id: int,
    ctx: OrgContext = Depends(require_perm(FEATURE_TASKS, PermissionAction.view)),
    db: Session = Depends(get_db),
) -> list[TaskOut]:
    q = select(Task).where(Task.org_id == org_id).order_by(Task.created_at.desc(), Task.title)
    return [TaskOut.model_validate(t) for t in db.scalars(q).all()]

@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    org_id: int,
    task_id: uuid.UUID,
    ctx: OrgContext = Depends(require_perm(FEATURE_TASKS, PermissionAction.view)),
    db: Session = Depends(get_db),
) -> TaskOut:
    return TaskOut.model_validate(_get_task(db, org_id, task_id))

@router.patch("/{task_id}", response_model=TaskOut)
def update_task(
    org_id: int,
    task_id: uuid.UUID,
    payload: TaskUpdateIn,
    ctx: OrgContext = Depends(require_perm(FEATURE_TASKS, PermissionAction.edit)),
    db: Session = Depends(get_db),
) -> TaskOut:
    t = _get_task(db, org_id, task_id)

    for field in ("title", "description", "is_completed", "category"):
        if field in payload.model_fields_set:
            value = getattr(payload, field)
            if value is None and field in ("title", "is_completed"):
                continue
            setattr(t, field, value)

    db.add(t)
    db.commit()
    db.refresh(t)
    return TaskOut.model_validate(t)

@router.patch("/{task_id}/toggle-complete", response_model=TaskOut)
def toggle_complete(
    org_id: int,
    task_id: uuid.UUID,
    ctx: OrgContext = Depends(require_perm(FEATURE_TASKS, PermissionAction.edit)),
    db: Session = Depends(get_db),
) -> TaskOut:
    t = _get_task(db, org_id, task_id)
    t.is_completed = not t.is_completed
    db.commit()
    db.refresh(t)
    return TaskOut.model_validate(t)

@router.delete("/{task_id}")
def delete_task(
    org_id: int,
    task_id: uuid.UUID,
    ctx: OrgContext = Depends(require_perm(FEATURE_TASKS, PermissionAction.delete)),
    db: Session = Depends(get_db),
) -> dict:
    t = _get_task(db, org_id, task_id)
    db.delete(t)
    db.commit()
    return {"deleted": True}
