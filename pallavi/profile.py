"""
Profile state shared by every flow-calling endpoint.

The store is passed explicitly to whatever needs it. Flows only read from it;
the profile endpoint is the only writer.
"""
from __future__ import annotations

import threading
from typing import Optional

from pydantic import ConfigDict, Field

from .flows.schemas import FlowModel


class UserProfile(FlowModel):
    name: str = Field("", description="The student's full name")
    skills: str = Field("", description="Comma separated skills")
    interests: str = Field("", description="Comma separated interests")
    career_preferences: Optional[str] = Field(None, description="Preferred roles or industries")

    @property
    def is_complete(self) -> bool:
        return bool(self.name and self.skills and self.interests)

    def summary(self) -> str:
        """Profile as one line of prose, as fed to the curriculum flow."""
        return f"Skills: {self.skills}. Interests: {self.interests}. Preferences: {self.career_preferences or 'None'}"

    def questionnaire(self) -> str:
        """Stand-in questionnaire answers for the dashboard's skill assessment."""
        return f"Based on my profile: Skills are {self.skills}, interests are {self.interests}."


class ProfileForm(UserProfile):
    """A profile as submitted by the user, with the bounds the profile form enforces."""
    name: str = Field(..., min_length=2, max_length=50, description="The student's full name")
    skills: str = Field(..., min_length=5, description="Please list at least one skill")
    interests: str = Field(..., min_length=5, description="Please list at least one interest")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "name": "Alex Doe",
            "skills": "React, TypeScript, Node.js",
            "interests": "Artificial Intelligence, Web Development, Design",
            "careerPreferences": "Software Engineer, Full-Stack Developer",
        }
    })


DEFAULT_PROFILE = UserProfile(
    name="Alex Doe",
    skills="React, TypeScript, Node.js",
    interests="Artificial Intelligence, Web Development, Design",
    career_preferences="Software Engineer, Full-Stack Developer",
)


class ProfileStore:
    """Thread-safe holder for the current profile."""

    def __init__(self, initial: Optional[UserProfile] = None):
        self._profile = initial if initial is not None else DEFAULT_PROFILE
        self._lock = threading.Lock()

    def get(self) -> UserProfile:
        with self._lock:
            return self._profile

    def replace(self, profile: UserProfile) -> UserProfile:
        # store a plain UserProfile even when handed the form subclass
        stored = UserProfile.model_validate(profile.model_dump())
        with self._lock:
            self._profile = stored
        return stored

    @property
    def is_complete(self) -> bool:
        return self.get().is_complete
