from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str | None = None
    parent_id: str | None = Field(None, alias="parentId")


class LikeAction(BaseModel):
    action: str | None = Field(None, description="'like' or 'unlike'")
