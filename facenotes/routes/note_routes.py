from typing import List

from fastapi import APIRouter, Depends

from .. import crud
from ..database import get_storage
from ..models.note_model import Note
from ..schemas import NoteCreate, NoteOut, NoteUpdate
from ..security import get_current_user_id
from ..storage import Storage

router = APIRouter(prefix="/api/notes", tags=["Notes"])


def _note_out(note: Note) -> NoteOut:
    return NoteOut(
        id=note.id,
        userId=note.user_id,
        title=note.title,
        content=note.content,
        priority=note.priority,
        completed=note.completed,
        dueDate=note.due_date,
        createdAt=note.created_at,
        updatedAt=note.updated_at,
    )


@router.get("", response_model=List[NoteOut])
def list_notes(
    user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)
):
    return [_note_out(n) for n in crud.list_notes(storage, user_id)]


@router.get("/{note_id}", response_model=NoteOut)
def get_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    return _note_out(crud.get_note(storage, user_id, note_id))


@router.post("", status_code=201, response_model=NoteOut)
def create_note(
    body: NoteCreate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    return _note_out(crud.create_note(storage, user_id, body))


@router.put("/{note_id}", response_model=NoteOut)
def update_note(
    note_id: str,
    body: NoteUpdate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    return _note_out(crud.update_note(storage, user_id, note_id, body))


@router.delete("/{note_id}")
def delete_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    crud.delete_note(storage, user_id, note_id)
    return {"message": "Note deleted successfully"}
