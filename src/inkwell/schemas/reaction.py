# src/inkwell/schemas/reaction.py
"""Like-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict

from inkwell.models.reaction import SubjectType


class LikeResponse(BaseModel):
    """Like state of a post or comment for the calling user."""

    subject_id: int
    subject_type: SubjectType
    user_id: int
    total_likes: int
    user_has_liked: bool

    model_config = ConfigDict(from_attributes=True)
