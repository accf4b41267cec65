"""
Profile routes for the signed-in user.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile

from letsgo.core.deps import get_current_user_id, get_profile_service
from letsgo.schemas.user import MeResponse, ProfileImageResponse, ProfileResponse
from letsgo.services.profile import ProfileService

router = APIRouter(tags=["profile"], dependencies=[Depends(get_current_user_id)])


@router.get("/meu-perfil", response_model=ProfileResponse)
async def my_profile(
    user_id: UUID = Depends(get_current_user_id),
    profile_service: ProfileService = Depends(get_profile_service),
):
    return profile_service.get(user_id)


@router.get("/me", response_model=MeResponse)
async def me(
    user_id: UUID = Depends(get_current_user_id),
    profile_service: ProfileService = Depends(get_profile_service),
):
    return profile_service.get(user_id)


@router.post("/alterar-perfil", response_model=MeResponse)
async def update_profile(
    name: Optional[str] = Form(None),
    last_name: Optional[str] = Form(None, alias="lastName"),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    user_id: UUID = Depends(get_current_user_id),
    profile_service: ProfileService = Depends(get_profile_service),
):
    return await profile_service.update(
        user_id,
        name=name,
        last_name=last_name,
        email=email,
        password=password,
        upload=image,
    )


@router.get("/carregar-imagem-perfil", response_model=ProfileImageResponse)
async def profile_image(
    user_id: UUID = Depends(get_current_user_id),
    profile_service: ProfileService = Depends(get_profile_service),
):
    return profile_service.get(user_id)
