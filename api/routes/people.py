"""
api/routes/people.py -- Person CRUD routes.

Routes:
  GET    /people          -- list the caller's people (all people without auth)
  POST   /people          -- create a person owned by the caller
  GET    /people/{id}     -- one person, or null
  PUT    /people/{id}     -- overwrite the fields sent, return the result or null
  DELETE /people/{id}     -- remove a person, return the removed record or null

Ownership:
  Every handler takes owner from get_owner(). With auth on it is the session
  username and the store scopes its WHERE clause to it, so reading, updating or
  deleting someone else's id looks exactly like a missing id (null). With auth
  off it is None and every record is global.

Failures: the store raises StoreFailure; api/main.py turns it into a 400.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from api.models import PersonCreate, PersonResponse, PersonUpdate
from auth.dependencies import get_owner
from people.models import Person
from people.store import PersonStore

router = APIRouter()


def _store(request: Request) -> PersonStore:
    return request.app.state.person_store


@router.get("/people", response_model=list[PersonResponse])
def list_people(request: Request, owner: Optional[str] = Depends(get_owner)) -> list[PersonResponse]:
    """Return every person visible to the caller."""
    return [PersonResponse.from_person(p) for p in _store(request).list_people(owner=owner)]


@router.post("/people", response_model=PersonResponse)
def create_person(
    request: Request,
    body: Optional[PersonCreate] = None,
    owner: Optional[str] = Depends(get_owner),
) -> PersonResponse:
    """Create a person. The owner is stamped from the session, never the body.

    A request without a body creates an empty person.
    """
    if body is None:
        body = PersonCreate()
    store = _store(request)
    person_id = store.create_person(Person(name=body.name, image=body.image, title=body.title, username=owner))
    return PersonResponse.from_person(store.get_person(person_id))


@router.get("/people/{person_id}", response_model=Optional[PersonResponse])
def get_person(
    request: Request,
    person_id: str,
    owner: Optional[str] = Depends(get_owner),
) -> Optional[PersonResponse]:
    person = _store(request).get_person(person_id, owner=owner)
    return PersonResponse.from_person(person) if person is not None else None


@router.put("/people/{person_id}", response_model=Optional[PersonResponse])
def update_person(
    request: Request,
    person_id: str,
    body: PersonUpdate,
    owner: Optional[str] = Depends(get_owner),
) -> Optional[PersonResponse]:
    """Partial update: fields absent from the body keep their stored value."""
    person = _store(request).update_person(person_id, body.model_dump(exclude_unset=True), owner=owner)
    return PersonResponse.from_person(person) if person is not None else None


@router.delete("/people/{person_id}", response_model=Optional[PersonResponse])
def delete_person(
    request: Request,
    person_id: str,
    owner: Optional[str] = Depends(get_owner),
):
    """Delete a person and return what was removed.

    In legacy status mode the original 204 is kept; the body is dropped
    because a 204 response cannot carry one.
    """
    person = _store(request).delete_person(person_id, owner=owner)
    if request.app.state.legacy_status_codes:
        return Response(status_code=204)
    return PersonResponse.from_person(person) if person is not None else None
