class OrderError(Exception):
    """Base class for failures the HTTP layer reports back to staff."""

    def __init__(self, order_id: str, message: str):
        super().__init__(message)
        self.order_id = order_id


class OrderNotFound(OrderError):
    def __init__(self, order_id: str):
        super().__init__(order_id, f"Order not found: {order_id}")


class InvalidTransition(OrderError):
    def __init__(self, order_id: str, from_status: str, to_status: str):
        super().__init__(
            order_id,
            f"Cannot move order {order_id} from '{from_status}' to '{to_status}'",
        )
        self.from_status = from_status
        self.to_status = to_status


class StaleOrderError(OrderError):
    """Another writer changed the order's status between read and write."""

    def __init__(self, order_id: str, expected_status: str):
        super().__init__(
            order_id,
            f"Order {order_id} is no longer '{expected_status}'; reload and retry",
        )
        self.expected_status = expected_status
