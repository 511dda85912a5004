"""Exception hierarchy raised by the heirloom runtime."""


class ShareError(TypeError):
    """A ``share`` call received an argument of the wrong shape."""


class InvalidOwnerError(ShareError):
    def __init__(self, owner):
        self.owner = owner
        super().__init__(
            f"Expected owner to be a class or an object with a __dict__, got {type(owner).__name__}"
        )


class InvalidIdentityError(ShareError):
    def __init__(self, identity):
        self.identity = identity
        super().__init__(
            f"Expected class identity to be a class, got {type(identity).__name__}"
        )


class InvalidMembersError(ShareError):
    def __init__(self, detail):
        self.detail = detail
        super().__init__(f"Invalid members: {detail}")


class ConstructionPolicyError(TypeError):
    """Construction or extension refused by a class guard."""


class AbstractClassError(ConstructionPolicyError):
    pass


class FinalClassError(ConstructionPolicyError):
    pass


class UnimplementedOperationError(NotImplementedError):
    """Raised by placeholders created with ``abstract("name")``."""


__all__ = [
    "ShareError",
    "InvalidOwnerError",
    "InvalidIdentityError",
    "InvalidMembersError",
    "ConstructionPolicyError",
    "AbstractClassError",
    "FinalClassError",
    "UnimplementedOperationError",
]
