"""Resources – UserClient (student directory and the signed-in profile)."""
from __future__ import annotations

from typing import Any, Mapping

from rental_query.application.pagination import PaginatedResult
from rental_query.application.query import same_id
from rental_query.application.query.engine import ResourceQueryEngine

__all__ = ["UserClient"]

ME = "me"
STUDENT_PROFILE = "student-profile"

User = dict[str, Any]


class UserClient(ResourceQueryEngine[User]):
    """Student directory; every list request carries ``roles=student``.

    The signed-in user's own profile is held apart from the list as
    :attr:`me`.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._me: User | None = None

    @property
    def me(self) -> User | None:
        return self._me

    async def fetch_me(self) -> User | None:
        response = await self._read(self.definition.detail_path(ME), failure="Failed to fetch profile")
        if response is None:
            return None
        self._me = response.data
        return self._me

    async def update_me(self, data: Mapping[str, Any]) -> User | None:
        response = await self.mutations.action("update profile", "PATCH", self.definition.detail_path(ME), data)
        if response is None:
            return None
        self._me = response.data if isinstance(response.data, Mapping) else {**(self._me or {}), **data}
        if self._store.find(self._store.id_of(self._me)) is not None:
            self._store.replace(self._me)
        return self._me

    async def update_student_profile(self, user_id: Any, data: Mapping[str, Any]) -> User | None:
        response = await self.mutations.action(
            "update student profile",
            "PATCH",
            self.definition.detail_path(user_id, STUDENT_PROFILE),
            data,
        )
        if response is None:
            return None
        user = response.data if isinstance(response.data, Mapping) else {"id": user_id, **data}
        user = self._store.replace(user, identifier=user_id)
        if self._me is not None and same_id(self._store.id_of(self._me), user_id):
            self._me = user
        return user

    async def fetch_students_by_university(self, university_id: Any) -> PaginatedResult[User] | None:
        return await self.fetch_list({"university_id": university_id})
