from leaveflow.models.user.user import Department, Designation, User

__all__ = ["Department", "Designation", "User"]
