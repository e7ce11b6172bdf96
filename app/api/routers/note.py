"""
Endpoints de notas. Todos requieren token; el dueño sale siempre de la
identidad autenticada, nunca del cuerpo ni de la URL.
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.api.deps import Identity, get_current_identity, get_note_service
from app.api.schemas.common import Envelope
from app.api.schemas.note import NoteCreate, NoteEnvelope, NoteListEnvelope, NoteOut, NotePinUpdate, NoteUpdate
from app.services.note_service import NoteService

router = APIRouter(tags=["Note"])


@router.post("/add-note", response_model=NoteEnvelope, summary="Crear nota")
async def add_note(
    payload: NoteCreate,
    identity: Identity = Depends(get_current_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note = await service.create(identity.subject_id, title=payload.title, content=payload.content, tags=payload.tags)
    return NoteEnvelope(note=NoteOut.from_doc(note), message="Note added successfully")


@router.get("/get-note/{note_id}", response_model=NoteEnvelope, summary="Obtener nota")
async def get_note(
    note_id: str,
    identity: Identity = Depends(get_current_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note = await service.get(identity.subject_id, note_id)
    return NoteEnvelope(note=NoteOut.from_doc(note), message="Note retrieved successfully")


@router.put(
    "/edit-note/{note_id}",
    response_model=NoteEnvelope,
    summary="Editar nota",
    description="Aplica sólo los campos enviados (title, content, tags, isPinned).",
)
async def edit_note(
    note_id: str,
    payload: NoteUpdate,
    identity: Identity = Depends(get_current_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note = await service.update(
        identity.subject_id,
        note_id,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        is_pinned=payload.is_pinned,
    )
    return NoteEnvelope(note=NoteOut.from_doc(note), message="Note updated successfully")


@router.get("/get-all-notes", response_model=NoteListEnvelope, summary="Listar notas (fijadas primero)")
@router.get("/get-all-notes/", response_model=NoteListEnvelope, include_in_schema=False)
async def get_all_notes(
    identity: Identity = Depends(get_current_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteListEnvelope:
    notes = await service.list_all(identity.subject_id)
    return NoteListEnvelope(notes=[NoteOut.from_doc(n) for n in notes], message="All notes retrieved successfully")


@router.delete("/delete-note/{note_id}", response_model=Envelope, summary="Borrar nota")
async def delete_note(
    note_id: str,
    identity: Identity = Depends(get_current_identity),
    service: NoteService = Depends(get_note_service),
) -> Envelope:
    await service.delete(identity.subject_id, note_id)
    return Envelope(message="Note deleted successfully")


@router.put("/update-note-pinned/{note_id}", response_model=NoteEnvelope, summary="Fijar/desfijar nota")
async def update_note_pinned(
    note_id: str,
    payload: NotePinUpdate,
    identity: Identity = Depends(get_current_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note = await service.set_pinned(identity.subject_id, note_id, payload.is_pinned)
    return NoteEnvelope(note=NoteOut.from_doc(note), message="Note updated successfully")


@router.get("/search-notes", response_model=NoteListEnvelope, summary="Buscar notas por texto")
async def search_notes(
    query: Optional[str] = Query(default=None),
    identity: Identity = Depends(get_current_identity),
    service: NoteService = Depends(get_note_service),
) -> NoteListEnvelope:
    notes = await service.search(identity.subject_id, query)
    return NoteListEnvelope(
        notes=[NoteOut.from_doc(n) for n in notes],
        message="Notes matching the search query retrieved successfully",
    )
