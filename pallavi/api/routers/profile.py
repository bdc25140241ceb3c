"""
Profile endpoints: read and replace the shared profile.
"""

import logging
from fastapi import APIRouter, Depends
from pydantic import Field

from ..dependencies.services import get_profile_store
from pallavi.flows.schemas import FlowModel
from pallavi.profile import ProfileForm, ProfileStore, UserProfile

logger = logging.getLogger(__name__)

router = APIRouter()


class ProfileResponse(FlowModel):
    profile: UserProfile
    is_complete: bool = Field(..., description="Name, skills and interests are all filled in")


@router.get("/", response_model=ProfileResponse)
async def get_profile(store: ProfileStore = Depends(get_profile_store)):
    profile = store.get()
    return ProfileResponse(profile=profile, is_complete=profile.is_complete)


@router.put("/", response_model=ProfileResponse)
async def replace_profile(form: ProfileForm, store: ProfileStore = Depends(get_profile_store)):
    """Replace the profile. Bounds are checked by FastAPI (422 on violation)."""
    profile = store.replace(form)
    logger.info(f"Profile updated for {profile.name}")
    return ProfileResponse(profile=profile, is_complete=profile.is_complete)
