from leaveflow.repositories.user.user_repository import UserRepository

__all__ = ["UserRepository"]
