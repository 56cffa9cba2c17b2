class NotFoundError(Exception):
    """A requested record could not be resolved."""


class ToolNotFoundError(NotFoundError):
    def __init__(self, token: str):
        super().__init__(f"Tool not found: {token}")
        self.token = token
