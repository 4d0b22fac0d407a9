from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CategoriesIn(BaseModel):
    email: str = ""
    categories: list[str] = Field(default_factory=list)


class CategoriesOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    categories: list[str]
    group_id: int = Field(alias="groupId")
    limit: int


class CategoriesSavedOut(CategoriesOut):
    ok: bool = True


class CatsIn(BaseModel):
    # key = "email::groupId" (storefront 템플릿이 만드는 형식)
    key: str = ""
    categories: list[str] = Field(default_factory=list)


class CatsOut(BaseModel):
    categories: list[str]


class CatsSavedOut(CatsOut):
    ok: bool = True
