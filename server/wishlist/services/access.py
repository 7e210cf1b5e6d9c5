"""Access-control capability shared by the API layer.

Every route decides what a caller may do by asking a :class:`Principal`;
role strings are never compared anywhere else.
"""

from dataclasses import dataclass, field

from wishlist.models.user import User, UserRole


@dataclass(frozen=True)
class Principal:
    username: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def anonymous(cls) -> "Principal":
        return cls()

    @classmethod
    def for_user(cls, user: User) -> "Principal":
        return cls(username=user.username, roles=frozenset({user.role}))

    def is_authenticated(self) -> bool:
        return self.username is not None

    def has_role(self, role: UserRole) -> bool:
        return role.value in self.roles

    def is_admin(self) -> bool:
        return self.is_authenticated() and self.has_role(UserRole.ADMIN)

    def can_create_feature(self) -> bool:
        return self.is_authenticated()

    def can_vote(self) -> bool:
        return self.is_authenticated()

    def can_edit_features(self) -> bool:
        return self.is_admin()
