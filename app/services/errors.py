class ProjectNotFoundError(LookupError):
    def __init__(self, project_id: int) -> None:
        super().__init__(f"Project '{project_id}' not found")
        self.project_id = project_id


class OrderNotFoundError(LookupError):
    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order '{order_id}' not found")
        self.order_id = order_id


class SettingNotFoundError(LookupError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Setting '{key}' not found")
        self.key = key


class AdminAuthenticationError(PermissionError):
    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class AdminAlreadyExistsError(ValueError):
    def __init__(self) -> None:
        super().__init__("An admin account already exists. Please log in.")


class InvalidPasswordChangeError(ValueError):
    pass
