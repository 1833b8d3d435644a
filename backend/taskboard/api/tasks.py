from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from ..db.session import get_db
from ..db import models
from ..domain.task_request import TaskRequest
from ..errors import NotFoundError
from ..security.principal import Principal
from ..services.task_service import TaskService, TaskNotFound
from .auth import get_current_principal

router = APIRouter(prefix="/tasks", tags=["tasks"])

class TaskIn(BaseModel):
    message: str = Field(..., min_length=1)
    assignee_id: str = Field(..., alias="assigneeId", min_length=1)

    model_config = ConfigDict(populate_by_name=True)

    def to_request(self) -> TaskRequest:
        return TaskRequest.builder().message(self.message).assignee_id(self.assignee_id).build()

class TaskOut(BaseModel):
    id: str
    message: str
    assignee_id: str = Field(..., alias="assigneeId")
    creator_id: str = Field(..., alias="creatorId")
    version: int
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


def _task_out(task: models.Task) -> TaskOut:
    return TaskOut(
        id=task.id,
        message=task.message,
        assigneeId=task.assignee_id,
        creatorId=task.creator_id,
        version=task.version,
        createdAt=task.created_at,
        updatedAt=task.updated_at,
    )

def _not_found() -> NotFoundError:
    return NotFoundError("TASK_NOT_FOUND", "Task not found")

@router.post("", response_model=TaskOut, status_code=201)
def create_task(body: TaskIn, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    task = TaskService(db).create(principal, body.to_request())
    return _task_out(task)

@router.get("", response_model=List[TaskOut])
def list_tasks(
    assigneeId: Optional[str] = Query(None),
    creatorId: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    tasks = TaskService(db).list_tasks(assignee_id=assigneeId, creator_id=creatorId)
    return [_task_out(t) for t in tasks]

@router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: str, db: Session = Depends(get_db)):
    try:
        task = TaskService(db).get_task(task_id)
    except TaskNotFound:
        raise _not_found()
    return _task_out(task)

@router.put("/{task_id}", response_model=TaskOut)
def update_task(task_id: str, body: TaskIn, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    try:
        task = TaskService(db).update(principal, task_id, body.to_request())
    except TaskNotFound:
        raise _not_found()
    return _task_out(task)

@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: str, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    try:
        TaskService(db).delete(principal, task_id)
    except TaskNotFound:
        raise _not_found()
