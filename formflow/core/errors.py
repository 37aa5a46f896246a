class FlowError(Exception):
    """Base class for failures that end a request without a rendered step."""


class NotFound(FlowError):
    pass


class FormNotFound(NotFound):
    def __init__(self, form_id: str):
        self.form_id = form_id
        super().__init__(f"Form not found: {form_id}")


class NodeNotFound(NotFound):
    def __init__(self, form_id: str, node_id: str = ""):
        self.form_id = form_id
        self.node_id = node_id
        detail = f"node {node_id!r}" if node_id else "entry node"
        super().__init__(f"Form {form_id} has no {detail}")


class StoreUnavailable(FlowError):
    """
    The key-value store could not be reached or rejected the command.
    Recoverable: the caller may retry the same request later.
    """

    def __init__(self, operation: str, key: str, cause: Exception = None):
        self.operation = operation
        self.key = key
        self.cause = cause
        super().__init__(f"Store unavailable during {operation} {key!r}: {cause}")
