class BillcycleError(ValueError):
    """Base class for validation failures raised by billcycle."""


class InvalidFrequency(BillcycleError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid frequency: {value!r}")


class InvalidSpec(BillcycleError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
