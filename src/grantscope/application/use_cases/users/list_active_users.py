"""List active users use case."""

from grantscope.application.ports import UserDirectory
from grantscope.domain.entities import UserSummary


class ListActiveUsersUseCase:
    """Active users for the inspector's user picker, sorted by name."""

    def __init__(self, user_directory: UserDirectory) -> None:
        self._directory = user_directory

    async def execute(self) -> list[UserSummary]:
        users = await self._directory.list_active_users()
        return sorted(users, key=lambda u: u.name.casefold())
