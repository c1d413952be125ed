from typing import List

from fastapi import APIRouter, Depends

from .. import crud
from ..database import get_storage
from ..schemas import (
    AuthenticateRequest,
    AuthenticateResponse,
    RegisterRequest,
    RegisterResponse,
    UserOut,
    UserSummary,
)
from ..security import create_access_token
from ..storage import Storage

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/register", status_code=201, response_model=RegisterResponse)
def register(body: RegisterRequest, storage: Storage = Depends(get_storage)):
    identity = crud.register_user(storage, body.name, body.faceDescriptor, body.profileImage)
    return RegisterResponse(
        message="User registered successfully!", userId=identity.id, name=identity.name
    )


@router.post("/authenticate", response_model=AuthenticateResponse)
def authenticate(body: AuthenticateRequest, storage: Storage = Depends(get_storage)):
    """
    Log in with a face descriptor.
    404 when nobody is enrolled yet, 401 when the closest user is too far away.
    """
    result = crud.authenticate_user(storage, body.faceDescriptor)
    identity = result.identity
    token = create_access_token({"sub": identity.id, "name": identity.name})
    return AuthenticateResponse(
        user=UserOut(id=identity.id, name=identity.name, profileImage=identity.profile_image),
        confidence=result.confidence,
        accessToken=token,
    )


@router.get("", response_model=List[UserSummary])
def list_users(storage: Storage = Depends(get_storage)):
    # descriptors are never sent back to the browser
    return [
        UserSummary(id=i.id, name=i.name, createdAt=i.created_at)
        for i in storage.list_identities()
    ]


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, storage: Storage = Depends(get_storage)):
    identity = crud.get_user(storage, user_id)
    return UserOut(id=identity.id, name=identity.name, profileImage=identity.profile_image)
